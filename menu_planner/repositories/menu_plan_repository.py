from sqlalchemy.orm import Session
from sqlalchemy import and_, select, case
from typing import List, Optional
from datetime import date
from menu_planner.models.menu_plan import MenuPlan, MealType
from menu_planner.models.menu_item import MenuItem
from menu_planner.repositories.repository import BaseRepository

# Day order of meal types; the enum column itself sorts by name
_MEAL_TYPE_ORDER = case(
    (MenuPlan.meal_type == MealType.BREAKFAST, 0),
    (MenuPlan.meal_type == MealType.LUNCH, 1),
    else_=2,
)


class MenuPlanRepository(BaseRepository[MenuPlan]):
    """Repository for scheduled meal operations."""

    def __init__(self, db: Session):
        super().__init__(MenuPlan, db)

    def get_by_date_range(
        self,
        household_id: int,
        start_date: date,
        end_date: date
    ) -> List[MenuPlan]:
        """Get a household's scheduled meals within an inclusive date range."""
        return (
            self.db.query(MenuPlan)
            .filter(
                and_(
                    MenuPlan.household_id == household_id,
                    MenuPlan.date >= start_date,
                    MenuPlan.date <= end_date
                )
            )
            .order_by(MenuPlan.date, _MEAL_TYPE_ORDER, MenuPlan.id)
            .all()
        )

    def get_by_slot(self, household_id: int, meal_date: date, meal_type: MealType) -> Optional[MenuPlan]:
        """Get the scheduled meal occupying a calendar slot, if any."""
        return (
            self.db.query(MenuPlan)
            .filter(
                and_(
                    MenuPlan.household_id == household_id,
                    MenuPlan.date == meal_date,
                    MenuPlan.meal_type == meal_type
                )
            )
            .first()
        )

    def get_by_menu_item(self, menu_item_id: int) -> List[MenuPlan]:
        """Get every scheduled instance of a menu item, past or future."""
        return (
            self.db.query(MenuPlan)
            .filter(MenuPlan.menu_item_id == menu_item_id)
            .order_by(MenuPlan.date)
            .all()
        )

    def get_menu_item_names_in_range(
        self,
        household_id: int,
        start_date: date,
        end_date: date
    ) -> List[str]:
        """Distinct names of menu items scheduled within a date range, sorted."""
        stmt = (
            select(MenuItem.name)
            .join(MenuPlan, MenuPlan.menu_item_id == MenuItem.id)
            .where(
                and_(
                    MenuPlan.household_id == household_id,
                    MenuPlan.date >= start_date,
                    MenuPlan.date <= end_date
                )
            )
            .distinct()
            .order_by(MenuItem.name)
        )
        return list(self.db.execute(stmt).scalars().all())
