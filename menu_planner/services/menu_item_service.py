from sqlalchemy.orm import Session
from typing import List

from menu_planner.models.menu_item import MenuItem
from menu_planner.repositories.menu_item_repository import MenuItemRepository
from menu_planner.repositories.household_repository import HouseholdRepository
from menu_planner.schemas.menu_item import MenuItemCreate, MenuItemUpdate
from menu_planner.services.popularity_service import PopularityService
from menu_planner.core.exception import (
    ResourceNotFoundException,
    AuthorizationException,
    ValidationException,
)


class MenuItemService:
    """Service layer for the household entree catalog."""

    def __init__(self, db: Session):
        self.db = db
        self.menu_item_repo = MenuItemRepository(db)
        self.household_repo = HouseholdRepository(db)
        self.popularity_service = PopularityService(db)

    def create_menu_item(self, user_id: int, data: MenuItemCreate) -> MenuItem:
        """
        Add an entree to a household catalog. New items start at score 0, visible.

        Raises:
            AuthorizationException: If user not member of household
            ValidationException: If name is blank
        """
        self._check_member(data.household_id, user_id)

        name = data.name.strip()
        if not name:
            raise ValidationException("Menu item name is required", field="name")

        item = MenuItem(
            household_id=data.household_id,
            name=name,
            genre=data.genre,
            popularity_score=0,
            is_hidden=False,
            created_by_id=user_id,
        )
        return self.menu_item_repo.create(item)

    def get_household_menu_items(self, household_id: int, user_id: int, include_hidden: bool = False) -> List[MenuItem]:
        self._check_member(household_id, user_id)
        return self.menu_item_repo.get_by_household(household_id, include_hidden=include_hidden)

    def get_menu_item(self, menu_item_id: int, user_id: int) -> MenuItem:
        return self._get_for_member(menu_item_id, user_id)

    def update_menu_item(self, menu_item_id: int, user_id: int, data: MenuItemUpdate) -> MenuItem:
        self._get_for_member(menu_item_id, user_id)

        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        if "name" in update_data:
            update_data["name"] = update_data["name"].strip()
            if not update_data["name"]:
                raise ValidationException("Menu item name is required", field="name")

        return self.menu_item_repo.update(menu_item_id, update_data)

    def hide_menu_item(self, menu_item_id: int, user_id: int) -> MenuItem:
        self._get_for_member(menu_item_id, user_id)
        return self.popularity_service.hide_menu_item(menu_item_id)

    def restore_menu_item(self, menu_item_id: int, user_id: int) -> MenuItem:
        self._get_for_member(menu_item_id, user_id)
        return self.popularity_service.restore_menu_item(menu_item_id)

    def delete_menu_item(self, menu_item_id: int, user_id: int) -> dict:
        """Permanently delete an item and everything scheduled or voted for it."""
        self._get_for_member(menu_item_id, user_id)
        return self.popularity_service.permanently_delete_menu_item(menu_item_id)

    def _check_member(self, household_id: int, user_id: int) -> None:
        if not self.household_repo.is_member(household_id, user_id):
            raise AuthorizationException("You must be a member of the household")

    def _get_for_member(self, menu_item_id: int, user_id: int) -> MenuItem:
        item = self.menu_item_repo.get(menu_item_id)
        if not item:
            raise ResourceNotFoundException("Menu item", menu_item_id)
        self._check_member(item.household_id, user_id)
        return item
