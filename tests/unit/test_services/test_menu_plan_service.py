import pytest
from datetime import date

from menu_planner.services.menu_plan_service import MenuPlanService
from menu_planner.services.side_service import SideService
from menu_planner.schemas.menu_plan import MenuPlanCreate, MenuPlanUpdate
from menu_planner.models import MenuItem, MenuVote, MealType
from menu_planner.core.exception import (
    AuthorizationException,
    ConflictException,
    ValidationException,
)

DAY = date(2024, 4, 10)


def _create(household, item, on=DAY, meal_type=MealType.DINNER, side=None):
    return MenuPlanCreate(
        household_id=household.id,
        date=on,
        meal_type=meal_type,
        menu_item_id=item.id,
        side_id=side.id if side else None,
    )


@pytest.mark.unit
class TestScheduleMeal:
    """One meal per date and meal type"""

    def test_schedule_into_empty_slot(self, db_session, test_household, member_user, make_menu_item):
        item = make_menu_item("Paella")

        plan = MenuPlanService(db_session).schedule_meal(member_user.id, _create(test_household, item))

        assert plan.menu_item_name == "Paella"
        assert plan.vote_score == 0

    def test_occupied_slot_conflicts(self, db_session, test_household, test_user, make_menu_item, make_plan):
        make_plan(make_menu_item("Paella"), DAY)
        other = make_menu_item("Risotto")

        with pytest.raises(ConflictException):
            MenuPlanService(db_session).schedule_meal(test_user.id, _create(test_household, other))

    def test_other_meal_type_same_day(self, db_session, test_household, test_user, make_menu_item, make_plan):
        item = make_menu_item("Paella")
        make_plan(item, DAY)

        plan = MenuPlanService(db_session).schedule_meal(
            test_user.id, _create(test_household, item, meal_type=MealType.LUNCH)
        )

        assert plan.meal_type == MealType.LUNCH

    def test_item_from_another_household(
        self, db_session, test_household, other_household, test_user, make_menu_item
    ):
        foreign = make_menu_item("Foreign", household=other_household)

        with pytest.raises(ValidationException):
            MenuPlanService(db_session).schedule_meal(test_user.id, _create(test_household, foreign))

    def test_outsider(self, db_session, test_household, outsider_user, make_menu_item):
        item = make_menu_item("Paella")

        with pytest.raises(AuthorizationException):
            MenuPlanService(db_session).schedule_meal(outsider_user.id, _create(test_household, item))


@pytest.mark.unit
class TestSideEligibility:

    def test_any_side_when_none_configured(self, db_session, test_household, test_user, make_menu_item, make_side):
        item = make_menu_item("Steak")
        fries = make_side("Fries")

        plan = MenuPlanService(db_session).schedule_meal(test_user.id, _create(test_household, item, side=fries))

        assert plan.side_name == "Fries"

    def test_only_configured_sides(self, db_session, test_household, test_user, make_menu_item, make_side):
        item = make_menu_item("Steak")
        salad = make_side("Salad")
        fries = make_side("Fries")
        SideService(db_session).assign_side(item.id, salad.id, test_user.id)
        service = MenuPlanService(db_session)

        with pytest.raises(ValidationException):
            service.schedule_meal(test_user.id, _create(test_household, item, side=fries))

        plan = service.schedule_meal(test_user.id, _create(test_household, item, side=salad))
        assert plan.side_id == salad.id

    def test_clear_side(self, db_session, test_user, make_menu_item, make_side, make_plan):
        rice = make_side("Rice")
        plan = make_plan(make_menu_item("Curry"), DAY, side=rice)

        updated = MenuPlanService(db_session).update_plan(plan.id, test_user.id, MenuPlanUpdate(clear_side=True))

        assert updated.side_id is None


@pytest.mark.unit
class TestMoveAndChange:

    def test_move_to_empty_slot(self, db_session, test_user, make_menu_item, make_plan):
        plan = make_plan(make_menu_item("Curry"), DAY)

        result = MenuPlanService(db_session).move_meal(plan.id, test_user.id, date(2024, 4, 12), MealType.LUNCH)

        assert result["swapped"] is None
        assert (result["moved"].date, result["moved"].meal_type) == (date(2024, 4, 12), MealType.LUNCH)

    def test_move_onto_occupied_slot_swaps(self, db_session, test_user, make_menu_item, make_plan):
        curry = make_plan(make_menu_item("Curry"), DAY)
        pizza = make_plan(make_menu_item("Pizza"), date(2024, 4, 11), MealType.LUNCH)

        result = MenuPlanService(db_session).move_meal(curry.id, test_user.id, date(2024, 4, 11), MealType.LUNCH)

        assert (result["moved"].date, result["moved"].meal_type) == (date(2024, 4, 11), MealType.LUNCH)
        assert result["swapped"].id == pizza.id
        assert (result["swapped"].date, result["swapped"].meal_type) == (DAY, MealType.DINNER)

    def test_changing_item_rescores_both(
        self, db_session, test_user, member_user, make_menu_item, make_plan, make_vote
    ):
        curry = make_menu_item("Curry")
        pizza = make_menu_item("Pizza")
        plan = make_plan(curry, DAY)
        make_vote(plan, test_user, 1)
        make_vote(plan, member_user, 1)

        MenuPlanService(db_session).update_plan(plan.id, test_user.id, MenuPlanUpdate(menu_item_id=pizza.id))

        assert db_session.get(MenuItem, curry.id).popularity_score == 0
        assert db_session.get(MenuItem, pizza.id).popularity_score == 2

    def test_delete_removes_votes_and_rescores(
        self, db_session, test_user, make_menu_item, make_plan, make_vote
    ):
        curry = make_menu_item("Curry")
        plan = make_plan(curry, DAY)
        make_vote(plan, test_user, 1)
        plan_id = plan.id

        MenuPlanService(db_session).delete_plan(plan_id, test_user.id)

        assert db_session.query(MenuVote).filter_by(menu_plan_id=plan_id).count() == 0
        assert db_session.get(MenuItem, curry.id).popularity_score == 0
