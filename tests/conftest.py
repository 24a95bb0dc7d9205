import os
import pytest
from datetime import date
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

# Set required environment variables for testing
os.environ["API_V1_STR"] = "/api/v1"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only-0123456789"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["GEMINI_API_KEY"] = "test-gemini-key"

from menu_planner.main import app
from menu_planner.database import get_db
from menu_planner.models import (
    Base,
    User,
    Household,
    MenuItem,
    MenuGenre,
    Side,
    Recipe,
    RecipeIngredient,
    MenuPlan,
    MealType,
    MenuVote,
    household_members,
)
from menu_planner.utils.security import create_access_token

TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="session")
def engine():
    """Create a test database engine for the entire test session."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Let SQLAlchemy drive BEGIN so SAVEPOINTs work with pysqlite
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session(engine):
    """
    Create a new database session for each test.
    Automatically rolls back changes after each test, including commits
    and rollbacks made by the code under test.
    """
    connection = engine.connect()
    transaction = connection.begin()

    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=connection,
        join_transaction_mode="create_savepoint",
    )
    session = TestingSessionLocal()

    def override_get_db():
        try:
            yield session
        finally:
            pass  # Closed after the test

    app.dependency_overrides[get_db] = override_get_db
    yield session

    session.close()
    transaction.rollback()
    connection.close()
    app.dependency_overrides.clear()


@pytest.fixture
def client(db_session):
    """Create a FastAPI TestClient with database session override."""
    with TestClient(app) as c:
        yield c


# ===== Users and households =====


def _make_user(db_session, email: str, name: str) -> User:
    user = User(email=email, name=name)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def test_user(db_session):
    """Head of the test household."""
    return _make_user(db_session, "head@example.com", "Head User")


@pytest.fixture
def member_user(db_session):
    """Regular member of the test household."""
    return _make_user(db_session, "member@example.com", "Member User")


@pytest.fixture
def outsider_user(db_session):
    """User who belongs to no household."""
    return _make_user(db_session, "outsider@example.com", "Outsider")


@pytest.fixture
def test_household(db_session, test_user, member_user):
    """Household with test_user as head and member_user as member."""
    household = Household(name="Test Household", head_user_id=test_user.id, popularity_threshold=-5)
    db_session.add(household)
    db_session.flush()
    db_session.execute(
        household_members.insert(),
        [
            {"user_id": test_user.id, "household_id": household.id, "role": "head"},
            {"user_id": member_user.id, "household_id": household.id, "role": "member"},
        ],
    )
    db_session.commit()
    db_session.refresh(household)
    return household


@pytest.fixture
def other_household(db_session, outsider_user):
    """A second household, owned by outsider_user."""
    household = Household(name="Other Household", head_user_id=outsider_user.id, popularity_threshold=-5)
    db_session.add(household)
    db_session.flush()
    db_session.execute(
        household_members.insert(),
        [{"user_id": outsider_user.id, "household_id": household.id, "role": "head"}],
    )
    db_session.commit()
    db_session.refresh(household)
    return household


# ===== Auth =====


def headers_for(user: User) -> dict:
    token = create_access_token({"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(test_user):
    """Authorization headers for the household head."""
    return headers_for(test_user)


@pytest.fixture
def member_headers(member_user):
    return headers_for(member_user)


@pytest.fixture
def outsider_headers(outsider_user):
    return headers_for(outsider_user)


# ===== Catalog and calendar factories =====


@pytest.fixture
def make_menu_item(db_session, test_household, test_user):
    def _make(name: str, genre: MenuGenre = MenuGenre.OTHER, household=None, **kwargs) -> MenuItem:
        item = MenuItem(
            household_id=(household or test_household).id,
            name=name,
            genre=genre,
            created_by_id=test_user.id,
            **kwargs,
        )
        db_session.add(item)
        db_session.commit()
        db_session.refresh(item)
        return item
    return _make


@pytest.fixture
def make_side(db_session, test_household, test_user):
    def _make(name: str, household=None) -> Side:
        side = Side(household_id=(household or test_household).id, name=name, created_by_id=test_user.id)
        db_session.add(side)
        db_session.commit()
        db_session.refresh(side)
        return side
    return _make


@pytest.fixture
def make_recipe(db_session):
    def _make(menu_item: MenuItem, ingredients=()) -> Recipe:
        recipe = Recipe(menu_item_id=menu_item.id, instructions="Cook it.", servings=4)
        for name, quantity, unit in ingredients:
            recipe.ingredients.append(RecipeIngredient(name=name, quantity=quantity, unit=unit))
        db_session.add(recipe)
        db_session.commit()
        db_session.refresh(recipe)
        return recipe
    return _make


@pytest.fixture
def make_plan(db_session, test_household, test_user):
    def _make(menu_item: MenuItem, on: date, meal_type: MealType = MealType.DINNER, side: Side = None) -> MenuPlan:
        plan = MenuPlan(
            household_id=menu_item.household_id,
            date=on,
            meal_type=meal_type,
            menu_item_id=menu_item.id,
            side_id=side.id if side else None,
            created_by_id=test_user.id,
        )
        db_session.add(plan)
        db_session.commit()
        db_session.refresh(plan)
        return plan
    return _make


@pytest.fixture
def make_vote(db_session):
    def _make(plan: MenuPlan, user: User, value: int) -> MenuVote:
        vote = MenuVote(menu_plan_id=plan.id, user_id=user.id, value=value)
        db_session.add(vote)
        db_session.commit()
        return vote
    return _make


@pytest.fixture
def make_headers():
    """Build authorization headers for any user."""
    return headers_for
