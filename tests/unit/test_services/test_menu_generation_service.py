import pytest
from datetime import date

from menu_planner.services.menu_generation_service import MenuGenerationService
from menu_planner.schemas.ai import MealSelection, ProposedMeal
from menu_planner.models import MenuPlan, MenuItem, AIPreferences, MealType
from menu_planner.core.exception import (
    AuthorizationException,
    ValidationException,
    OverwriteConfirmationRequiredException,
    GenerationUnavailableException,
    NoValidPlansException,
)

MONDAY = date(2024, 3, 4)
TUESDAY = date(2024, 3, 5)


class StubGenerator:
    """Records what it was given and answers with canned proposals."""

    def __init__(self, proposals=(), error=None):
        self.proposals = list(proposals)
        self.error = error
        self.calls = []

    def generate(self, catalog, exclusions, selections, dietary_text, genre_weights):
        self.calls.append({
            "catalog": catalog,
            "exclusions": exclusions,
            "selections": selections,
            "dietary_text": dietary_text,
            "genre_weights": genre_weights,
        })
        if self.error:
            raise self.error
        return self.proposals


def _proposal(on, meal_type, name):
    return ProposedMeal(date=on.isoformat(), meal_type=meal_type, menu_item_name=name)


def _select(*slots):
    return [MealSelection(date=on, meal_type=meal_type) for on, meal_type in slots]


@pytest.fixture
def catalog_items(make_menu_item):
    return {name: make_menu_item(name) for name in ("Lasagna", "Tacos", "Pancakes")}


@pytest.mark.unit
@pytest.mark.ai
class TestGenerateMenu:
    """Generated meals land only in requested, valid slots"""

    def test_creates_plans_for_valid_proposals(self, db_session, test_household, test_user, catalog_items):
        generator = StubGenerator([
            _proposal(MONDAY, "dinner", "Lasagna"),
            _proposal(TUESDAY, "Breakfast", "Pancakes"),
        ])
        service = MenuGenerationService(db_session, generator)

        result = service.generate_menu(
            test_household.id,
            test_user.id,
            _select((MONDAY, MealType.DINNER), (TUESDAY, MealType.BREAKFAST)),
        )

        created = {(p.date, p.meal_type): p.menu_item_name for p in result["created"]}
        assert created == {
            (MONDAY, MealType.DINNER): "Lasagna",
            (TUESDAY, MealType.BREAKFAST): "Pancakes",
        }
        assert result["replaced_count"] == 0
        assert result["dropped_count"] == 0

    def test_invalid_proposals_are_dropped(self, db_session, test_household, test_user, catalog_items):
        generator = StubGenerator([
            _proposal(MONDAY, "dinner", "Lasagna"),
            _proposal(MONDAY, "dinner", "Tacos"),
            _proposal(TUESDAY, "dinner", "Tacos"),
            ProposedMeal(date="2024-02-30", meal_type="dinner", menu_item_name="Tacos"),
            _proposal(MONDAY, "brunch", "Tacos"),
            _proposal(MONDAY, "lunch", "Lasagne"),
        ])
        service = MenuGenerationService(db_session, generator)

        result = service.generate_menu(
            test_household.id,
            test_user.id,
            _select((MONDAY, MealType.DINNER), (MONDAY, MealType.LUNCH)),
        )

        assert [(p.date, p.meal_type, p.menu_item_name) for p in result["created"]] == [
            (MONDAY, MealType.DINNER, "Lasagna")
        ]
        assert result["dropped_count"] == 5
        assert db_session.query(MenuPlan).filter_by(household_id=test_household.id).count() == 1

    def test_nothing_usable(self, db_session, test_household, test_user, catalog_items):
        generator = StubGenerator([_proposal(MONDAY, "dinner", "Sushi")])
        service = MenuGenerationService(db_session, generator)

        with pytest.raises(NoValidPlansException):
            service.generate_menu(test_household.id, test_user.id, _select((MONDAY, MealType.DINNER)))

        assert db_session.query(MenuPlan).count() == 0

    def test_hidden_items_not_offered(self, db_session, test_household, test_user, catalog_items):
        catalog_items["Tacos"].is_hidden = True
        db_session.commit()
        generator = StubGenerator([_proposal(MONDAY, "dinner", "Tacos")])
        service = MenuGenerationService(db_session, generator)

        with pytest.raises(NoValidPlansException):
            service.generate_menu(test_household.id, test_user.id, _select((MONDAY, MealType.DINNER)))

        offered = [entry.name for entry in generator.calls[0]["catalog"]]
        assert "Tacos" not in offered

    def test_empty_catalog(self, db_session, test_household, test_user):
        generator = StubGenerator()

        with pytest.raises(ValidationException):
            MenuGenerationService(db_session, generator).generate_menu(
                test_household.id, test_user.id, _select((MONDAY, MealType.DINNER))
            )
        assert generator.calls == []

    def test_no_selections(self, db_session, test_household, test_user, catalog_items):
        with pytest.raises(ValidationException):
            MenuGenerationService(db_session, StubGenerator()).generate_menu(
                test_household.id, test_user.id, []
            )

    def test_outsider(self, db_session, test_household, outsider_user, catalog_items):
        with pytest.raises(AuthorizationException):
            MenuGenerationService(db_session, StubGenerator()).generate_menu(
                test_household.id, outsider_user.id, _select((MONDAY, MealType.DINNER))
            )


@pytest.mark.unit
@pytest.mark.ai
class TestOverwrite:

    def test_occupied_slot_needs_confirmation(
        self, db_session, test_household, test_user, catalog_items, make_plan
    ):
        existing = make_plan(catalog_items["Tacos"], MONDAY)
        generator = StubGenerator([_proposal(MONDAY, "dinner", "Lasagna")])
        service = MenuGenerationService(db_session, generator)

        with pytest.raises(OverwriteConfirmationRequiredException) as exc_info:
            service.generate_menu(
                test_household.id,
                test_user.id,
                _select((MONDAY, MealType.DINNER), (TUESDAY, MealType.DINNER)),
            )

        assert exc_info.value.status_code == 409
        assert [slot["plan_id"] for slot in exc_info.value.occupied] == [existing.id]
        assert generator.calls == []
        assert db_session.get(MenuPlan, existing.id) is not None

    def test_overwrite_replaces_and_rescores(
        self, db_session, test_household, test_user, catalog_items, make_plan, make_vote
    ):
        existing = make_plan(catalog_items["Tacos"], MONDAY)
        make_vote(existing, test_user, 1)
        tacos = catalog_items["Tacos"]
        tacos.popularity_score = 1
        db_session.commit()
        generator = StubGenerator([_proposal(MONDAY, "dinner", "Lasagna")])

        result = MenuGenerationService(db_session, generator).generate_menu(
            test_household.id, test_user.id, _select((MONDAY, MealType.DINNER)), overwrite=True
        )

        assert result["replaced_count"] == 1
        plans = db_session.query(MenuPlan).filter_by(household_id=test_household.id).all()
        assert [p.menu_item_name for p in plans] == ["Lasagna"]
        assert db_session.get(MenuItem, tacos.id).popularity_score == 0

    def test_generator_failure_keeps_existing_plans(
        self, db_session, test_household, test_user, catalog_items, make_plan
    ):
        existing = make_plan(catalog_items["Tacos"], MONDAY)
        generator = StubGenerator(error=RuntimeError("upstream timeout"))

        with pytest.raises(GenerationUnavailableException):
            MenuGenerationService(db_session, generator).generate_menu(
                test_household.id, test_user.id, _select((MONDAY, MealType.DINNER)), overwrite=True
            )

        plans = db_session.query(MenuPlan).filter_by(household_id=test_household.id).all()
        assert [p.id for p in plans] == [existing.id]

    def test_no_valid_plans_keeps_existing_plans(
        self, db_session, test_household, test_user, catalog_items, make_plan
    ):
        existing = make_plan(catalog_items["Tacos"], MONDAY)
        generator = StubGenerator([_proposal(MONDAY, "dinner", "Unknown")])

        with pytest.raises(NoValidPlansException):
            MenuGenerationService(db_session, generator).generate_menu(
                test_household.id, test_user.id, _select((MONDAY, MealType.DINNER)), overwrite=True
            )

        assert db_session.query(MenuPlan).filter_by(id=existing.id).count() == 1


@pytest.mark.unit
@pytest.mark.ai
class TestGenerationInputs:

    def test_exclusions_cover_fourteen_days_before_earliest_slot(
        self, db_session, test_household, test_user, make_menu_item, make_plan
    ):
        earliest = date(2024, 3, 15)
        make_plan(make_menu_item("Too Old"), date(2024, 2, 29))
        make_plan(make_menu_item("Oldest Kept"), date(2024, 3, 1))
        make_plan(make_menu_item("Yesterday"), date(2024, 3, 14))
        make_plan(make_menu_item("Same Day"), date(2024, 3, 15), MealType.LUNCH)

        names = MenuGenerationService(db_session, StubGenerator()).exclusion_names(test_household.id, earliest)

        assert names == ["Oldest Kept", "Yesterday"]

    def test_saved_preferences_fill_missing_inputs(
        self, db_session, test_household, test_user, catalog_items
    ):
        db_session.add(AIPreferences(
            household_id=test_household.id,
            dietary_instructions="Vegetarian on Mondays",
            genre_weights='{"Italian": 2.0}',
        ))
        db_session.commit()
        generator = StubGenerator([_proposal(MONDAY, "dinner", "Lasagna")])
        service = MenuGenerationService(db_session, generator)

        service.generate_menu(test_household.id, test_user.id, _select((MONDAY, MealType.DINNER)))
        service.generate_menu(
            test_household.id,
            test_user.id,
            _select((MONDAY, MealType.DINNER)),
            dietary_instructions="Anything",
            overwrite=True,
        )

        first, second = generator.calls
        assert first["dietary_text"] == "Vegetarian on Mondays"
        assert first["genre_weights"] == {"Italian": 2.0}
        assert second["dietary_text"] == "Anything"
        assert second["genre_weights"] == {"Italian": 2.0}

    def test_duplicate_selections_collapse(self, db_session, test_household, test_user, catalog_items):
        generator = StubGenerator([_proposal(MONDAY, "dinner", "Lasagna")])

        MenuGenerationService(db_session, generator).generate_menu(
            test_household.id,
            test_user.id,
            _select((MONDAY, MealType.DINNER), (MONDAY, MealType.DINNER)),
        )

        assert len(generator.calls[0]["selections"]) == 1

    def test_generation_context(self, db_session, test_household, test_user, catalog_items):
        context = MenuGenerationService(db_session, StubGenerator()).get_generation_context(
            test_household.id, test_user.id, MONDAY
        )

        assert sorted(entry.name for entry in context["catalog"]) == ["Lasagna", "Pancakes", "Tacos"]
        assert context["exclusions"] == []
