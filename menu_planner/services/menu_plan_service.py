from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
import logging

from menu_planner.models.menu_plan import MenuPlan, MealType
from menu_planner.models.menu_item import MenuItem
from menu_planner.repositories.menu_plan_repository import MenuPlanRepository
from menu_planner.repositories.menu_item_repository import MenuItemRepository
from menu_planner.repositories.side_repository import SideRepository
from menu_planner.repositories.household_repository import HouseholdRepository
from menu_planner.schemas.menu_plan import MenuPlanCreate, MenuPlanUpdate
from menu_planner.services.popularity_service import PopularityService
from menu_planner.core.exception import (
    ResourceNotFoundException,
    AuthorizationException,
    ValidationException,
    ConflictException,
)

logger = logging.getLogger(__name__)

# Parking date for a plan while two plans trade slots
_SWAP_PARKING_DATE = date.min


class MenuPlanService:
    """Service layer for the household calendar (one meal per date and meal type)."""

    def __init__(self, db: Session):
        self.db = db
        self.menu_plan_repo = MenuPlanRepository(db)
        self.menu_item_repo = MenuItemRepository(db)
        self.side_repo = SideRepository(db)
        self.household_repo = HouseholdRepository(db)
        self.popularity_service = PopularityService(db)

    def schedule_meal(self, user_id: int, data: MenuPlanCreate) -> MenuPlan:
        """
        Put a menu item (and optionally a side) into an empty calendar slot.

        Raises:
            AuthorizationException: If user not member
            ConflictException: If the slot already holds a meal
            ValidationException: If the item or side is not usable by this household
        """
        self._check_member(data.household_id, user_id)

        existing = self.menu_plan_repo.get_by_slot(data.household_id, data.date, data.meal_type)
        if existing:
            raise ConflictException(
                f"{data.meal_type.value.capitalize()} on {data.date.isoformat()} is already planned",
                details={"plan_id": existing.id},
            )

        item = self._get_household_menu_item(data.household_id, data.menu_item_id)
        self._check_side(item, data.side_id)

        plan = MenuPlan(
            household_id=data.household_id,
            date=data.date,
            meal_type=data.meal_type,
            menu_item_id=item.id,
            side_id=data.side_id,
            created_by_id=user_id,
        )
        return self.menu_plan_repo.create(plan)

    def get_plans(self, household_id: int, user_id: int, start_date: date, end_date: date) -> List[MenuPlan]:
        """Scheduled meals of a household in an inclusive date range."""
        self._check_member(household_id, user_id)
        if end_date < start_date:
            raise ValidationException("End date must not be before start date", field="end_date")
        return self.menu_plan_repo.get_by_date_range(household_id, start_date, end_date)

    def get_plan(self, plan_id: int, user_id: int) -> MenuPlan:
        return self._get_for_member(plan_id, user_id)

    def update_plan(self, plan_id: int, user_id: int, data: MenuPlanUpdate) -> MenuPlan:
        """
        Swap the entree and/or side of a scheduled meal.
        Votes stay with the meal, so both affected items are rescored.
        """
        plan = self._get_for_member(plan_id, user_id)
        previous_item_id = plan.menu_item_id

        item = plan.menu_item
        if data.menu_item_id is not None and data.menu_item_id != plan.menu_item_id:
            item = self._get_household_menu_item(plan.household_id, data.menu_item_id)
            plan.menu_item_id = item.id

        if data.clear_side:
            plan.side_id = None
        elif data.side_id is not None:
            self._check_side(item, data.side_id)
            plan.side_id = data.side_id

        self.db.commit()
        self.db.refresh(plan)

        if plan.menu_item_id != previous_item_id:
            self.popularity_service.recompute_popularity(previous_item_id)
            self.popularity_service.recompute_popularity(plan.menu_item_id)
            self.db.refresh(plan)

        return plan

    def move_meal(self, plan_id: int, user_id: int, target_date: date, target_meal_type: MealType) -> dict:
        """
        Move a scheduled meal to another slot. If the slot is taken the two
        meals trade places.

        Returns:
            Dict with the moved plan and the swapped plan (None when the target was empty)
        """
        plan = self._get_for_member(plan_id, user_id)
        occupant = self.menu_plan_repo.get_by_slot(plan.household_id, target_date, target_meal_type)

        if occupant is not None and occupant.id == plan.id:
            return {"moved": plan, "swapped": None}

        if occupant is None:
            plan.date = target_date
            plan.meal_type = target_meal_type
            self.db.commit()
            self.db.refresh(plan)
            return {"moved": plan, "swapped": None}

        origin_date, origin_meal_type = plan.date, plan.meal_type

        plan.date = _SWAP_PARKING_DATE
        self.db.flush()

        occupant.date = origin_date
        occupant.meal_type = origin_meal_type
        self.db.flush()

        plan.date = target_date
        plan.meal_type = target_meal_type
        self.db.commit()

        self.db.refresh(plan)
        self.db.refresh(occupant)
        logger.info("Swapped menu plans %s and %s", plan.id, occupant.id)
        return {"moved": plan, "swapped": occupant}

    def delete_plan(self, plan_id: int, user_id: int) -> dict:
        """Remove a scheduled meal and its votes, then rescore its item."""
        plan = self._get_for_member(plan_id, user_id)
        menu_item_id = plan.menu_item_id

        self.menu_plan_repo.delete(plan_id)
        self.popularity_service.recompute_popularity(menu_item_id)
        return {"message": "Menu plan deleted successfully"}

    def _check_side(self, item: MenuItem, side_id: Optional[int]) -> None:
        if side_id is None:
            return

        side = self.side_repo.get(side_id)
        if not side or side.household_id != item.household_id:
            raise ValidationException("Side does not belong to this household", field="side_id")

        eligible = self.side_repo.get_entree_sides(item.id)
        if eligible and side_id not in {s.id for s in eligible}:
            raise ValidationException(
                f"'{side.name}' is not offered with '{item.name}'", field="side_id"
            )

    def _get_household_menu_item(self, household_id: int, menu_item_id: int) -> MenuItem:
        item = self.menu_item_repo.get(menu_item_id)
        if not item:
            raise ResourceNotFoundException("Menu item", menu_item_id)
        if item.household_id != household_id:
            raise ValidationException("Menu item does not belong to this household", field="menu_item_id")
        return item

    def _check_member(self, household_id: int, user_id: int) -> None:
        if not self.household_repo.is_member(household_id, user_id):
            raise AuthorizationException("You must be a member of the household")

    def _get_for_member(self, plan_id: int, user_id: int) -> MenuPlan:
        plan = self.menu_plan_repo.get(plan_id)
        if not plan:
            raise ResourceNotFoundException("Menu plan", plan_id)
        self._check_member(plan.household_id, user_id)
        return plan
