from sqlalchemy.orm import Session
from typing import List

from menu_planner.models.side import Side
from menu_planner.repositories.side_repository import SideRepository
from menu_planner.repositories.menu_item_repository import MenuItemRepository
from menu_planner.repositories.household_repository import HouseholdRepository
from menu_planner.schemas.side import SideCreate, SideUpdate
from menu_planner.core.exception import (
    ResourceNotFoundException,
    AuthorizationException,
    ValidationException,
)


class SideService:
    """Service layer for side dishes and the sides each entree offers."""

    def __init__(self, db: Session):
        self.db = db
        self.side_repo = SideRepository(db)
        self.menu_item_repo = MenuItemRepository(db)
        self.household_repo = HouseholdRepository(db)

    def create_side(self, user_id: int, data: SideCreate) -> Side:
        self._check_member(data.household_id, user_id)

        name = data.name.strip()
        if not name:
            raise ValidationException("Side name is required", field="name")

        side = Side(household_id=data.household_id, name=name, created_by_id=user_id)
        return self.side_repo.create(side)

    def get_household_sides(self, household_id: int, user_id: int, include_hidden: bool = False) -> List[Side]:
        self._check_member(household_id, user_id)
        return self.side_repo.get_by_household(household_id, include_hidden=include_hidden)

    def update_side(self, side_id: int, user_id: int, data: SideUpdate) -> Side:
        self._get_for_member(side_id, user_id)

        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        if "name" in update_data:
            update_data["name"] = update_data["name"].strip()
            if not update_data["name"]:
                raise ValidationException("Side name is required", field="name")

        return self.side_repo.update(side_id, update_data)

    def hide_side(self, side_id: int, user_id: int) -> Side:
        self._get_for_member(side_id, user_id)
        return self.side_repo.update(side_id, {"is_hidden": True})

    def restore_side(self, side_id: int, user_id: int) -> Side:
        self._get_for_member(side_id, user_id)
        return self.side_repo.update(side_id, {"is_hidden": False})

    def delete_side(self, side_id: int, user_id: int) -> dict:
        """Delete a side. Scheduled meals using it simply lose their side."""
        side = self._get_for_member(side_id, user_id)
        name = side.name
        self.side_repo.delete(side_id)
        self.db.expire_all()
        return {"message": f"Side '{name}' deleted successfully"}

    # ===== Entree sides =====

    def get_entree_sides(self, menu_item_id: int, user_id: int) -> List[Side]:
        self._get_menu_item_for_member(menu_item_id, user_id)
        return self.side_repo.get_entree_sides(menu_item_id)

    def assign_side(self, menu_item_id: int, side_id: int, user_id: int) -> List[Side]:
        """
        Offer a side with an entree.

        Raises:
            ValidationException: If the side and entree belong to different households
        """
        item = self._get_menu_item_for_member(menu_item_id, user_id)
        side = self._get_for_member(side_id, user_id)
        if side.household_id != item.household_id:
            raise ValidationException("Side and menu item belong to different households")

        self.side_repo.assign(menu_item_id, side_id)
        return self.side_repo.get_entree_sides(menu_item_id)

    def unassign_side(self, menu_item_id: int, side_id: int, user_id: int) -> List[Side]:
        self._get_menu_item_for_member(menu_item_id, user_id)
        if not self.side_repo.unassign(menu_item_id, side_id):
            raise ResourceNotFoundException("Entree side link")
        return self.side_repo.get_entree_sides(menu_item_id)

    def _check_member(self, household_id: int, user_id: int) -> None:
        if not self.household_repo.is_member(household_id, user_id):
            raise AuthorizationException("You must be a member of the household")

    def _get_for_member(self, side_id: int, user_id: int) -> Side:
        side = self.side_repo.get(side_id)
        if not side:
            raise ResourceNotFoundException("Side", side_id)
        self._check_member(side.household_id, user_id)
        return side

    def _get_menu_item_for_member(self, menu_item_id: int, user_id: int):
        item = self.menu_item_repo.get(menu_item_id)
        if not item:
            raise ResourceNotFoundException("Menu item", menu_item_id)
        self._check_member(item.household_id, user_id)
        return item
