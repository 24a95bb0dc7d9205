from sqlalchemy.orm import Session
from typing import Dict, List, Optional
from menu_planner.models.recipe import Recipe, RecipeIngredient
from menu_planner.models.menu_item import MenuItem
from menu_planner.repositories.repository import BaseRepository


class RecipeRepository(BaseRepository[Recipe]):
    """Repository for recipe operations."""

    def __init__(self, db: Session):
        super().__init__(Recipe, db)

    def get_by_menu_item(self, menu_item_id: int) -> Optional[Recipe]:
        """Get the recipe attached to a menu item, if any."""
        return self.db.query(Recipe).filter(Recipe.menu_item_id == menu_item_id).first()

    def get_by_menu_items(self, menu_item_ids: List[int]) -> Dict[int, Recipe]:
        """Get recipes for several menu items, keyed by menu item ID."""
        if not menu_item_ids:
            return {}
        recipes = self.db.query(Recipe).filter(Recipe.menu_item_id.in_(menu_item_ids)).all()
        return {recipe.menu_item_id: recipe for recipe in recipes}

    def get_by_household(self, household_id: int) -> List[Recipe]:
        """Get all recipes for a household's menu items."""
        return (
            self.db.query(Recipe)
            .join(MenuItem, Recipe.menu_item_id == MenuItem.id)
            .filter(MenuItem.household_id == household_id)
            .order_by(MenuItem.name, Recipe.id)
            .all()
        )

    def replace_ingredients(self, recipe: Recipe, ingredients: List[dict]) -> None:
        """
        Replace all ingredients of a recipe. Does not commit.

        Args:
            recipe: Recipe to update
            ingredients: List of dicts with name, quantity and unit
        """
        recipe.ingredients.clear()
        for ingredient_data in ingredients:
            recipe.ingredients.append(RecipeIngredient(**ingredient_data))
