from sqlalchemy.orm import Session
from sqlalchemy import select, func
from typing import List, Optional
from menu_planner.models.shopping_list import ShoppingList, ShoppingItem, ShoppingListTemplate
from menu_planner.repositories.repository import BaseRepository


class ShoppingListRepository(BaseRepository[ShoppingList]):
    """Repository for shopping list operations."""

    def __init__(self, db: Session):
        super().__init__(ShoppingList, db)

    def get_by_household(self, household_id: int, skip: int = 0, limit: int = 100) -> List[ShoppingList]:
        """Get all shopping lists for a household, newest first."""
        return (
            self.db.query(ShoppingList)
            .filter(ShoppingList.household_id == household_id)
            .order_by(ShoppingList.created_at.desc(), ShoppingList.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_item(self, item_id: int) -> Optional[ShoppingItem]:
        return self.db.query(ShoppingItem).filter(ShoppingItem.id == item_id).first()

    def get_items(self, list_id: int) -> List[ShoppingItem]:
        """Items of a list in display order."""
        return (
            self.db.query(ShoppingItem)
            .filter(ShoppingItem.shopping_list_id == list_id)
            .order_by(ShoppingItem.sort_order, ShoppingItem.id)
            .all()
        )

    def get_max_sort_order(self, list_id: int) -> Optional[int]:
        """Highest sort_order in a list, or None for an empty list."""
        stmt = select(func.max(ShoppingItem.sort_order)).where(
            ShoppingItem.shopping_list_id == list_id
        )
        return self.db.execute(stmt).scalar_one_or_none()


class ShoppingListTemplateRepository(BaseRepository[ShoppingListTemplate]):
    """Repository for saved shopping list templates."""

    def __init__(self, db: Session):
        super().__init__(ShoppingListTemplate, db)

    def get_by_household(self, household_id: int) -> List[ShoppingListTemplate]:
        return (
            self.db.query(ShoppingListTemplate)
            .filter(ShoppingListTemplate.household_id == household_id)
            .order_by(ShoppingListTemplate.name, ShoppingListTemplate.id)
            .all()
        )
