from sqlalchemy.orm import Session
from typing import List

from menu_planner.models.recipe import Recipe
from menu_planner.models.menu_item import MenuItem
from menu_planner.repositories.recipe_repository import RecipeRepository
from menu_planner.repositories.menu_item_repository import MenuItemRepository
from menu_planner.repositories.household_repository import HouseholdRepository
from menu_planner.schemas.recipe import RecipeCreate, RecipeUpdate, RecipeIngredientCreate
from menu_planner.core.exception import (
    ResourceNotFoundException,
    AuthorizationException,
    ValidationException,
    DuplicateResourceException,
)


class RecipeService:
    """Service layer for recipe operations."""

    def __init__(self, db: Session):
        self.db = db
        self.recipe_repo = RecipeRepository(db)
        self.menu_item_repo = MenuItemRepository(db)
        self.household_repo = HouseholdRepository(db)

    def create_recipe(self, user_id: int, data: RecipeCreate) -> Recipe:
        """
        Create the recipe for a menu item.

        Args:
            user_id: User creating the recipe
            data: Recipe creation data

        Returns:
            Created recipe

        Raises:
            AuthorizationException: If user not member of the item's household
            DuplicateResourceException: If the menu item already has a recipe
            ValidationException: If an ingredient line is invalid
        """
        self._get_menu_item_for_member(data.menu_item_id, user_id)

        if self.recipe_repo.get_by_menu_item(data.menu_item_id):
            raise DuplicateResourceException("Recipe for menu item", str(data.menu_item_id))

        ingredients = self._clean_ingredients(data.ingredients)

        recipe = Recipe(**data.model_dump(exclude={"ingredients"}))
        self.recipe_repo.replace_ingredients(recipe, ingredients)
        return self.recipe_repo.create(recipe)

    def get_recipe(self, recipe_id: int, user_id: int) -> Recipe:
        recipe = self.recipe_repo.get(recipe_id)
        if not recipe:
            raise ResourceNotFoundException("Recipe", recipe_id)
        self._get_menu_item_for_member(recipe.menu_item_id, user_id)
        return recipe

    def get_recipe_for_menu_item(self, menu_item_id: int, user_id: int) -> Recipe:
        self._get_menu_item_for_member(menu_item_id, user_id)
        recipe = self.recipe_repo.get_by_menu_item(menu_item_id)
        if not recipe:
            raise ResourceNotFoundException("Recipe for menu item", menu_item_id)
        return recipe

    def get_household_recipes(self, household_id: int, user_id: int) -> List[Recipe]:
        if not self.household_repo.is_member(household_id, user_id):
            raise AuthorizationException("You must be a member of the household")
        return self.recipe_repo.get_by_household(household_id)

    def update_recipe(self, recipe_id: int, user_id: int, data: RecipeUpdate) -> Recipe:
        """
        Update recipe fields; a given ingredient list replaces the existing one.
        """
        recipe = self.get_recipe(recipe_id, user_id)

        if data.ingredients is not None:
            self.recipe_repo.replace_ingredients(recipe, self._clean_ingredients(data.ingredients))

        update_data = data.model_dump(exclude={"ingredients"}, exclude_unset=True)
        for key, value in update_data.items():
            if key in ("instructions", "servings") and value is None:
                continue
            setattr(recipe, key, value)

        self.db.commit()
        self.db.refresh(recipe)
        return recipe

    def delete_recipe(self, recipe_id: int, user_id: int) -> dict:
        self.get_recipe(recipe_id, user_id)
        self.recipe_repo.delete(recipe_id)
        return {"message": "Recipe deleted successfully"}

    @staticmethod
    def _clean_ingredients(ingredients: List[RecipeIngredientCreate]) -> List[dict]:
        cleaned = []
        for index, ingredient in enumerate(ingredients):
            name = ingredient.name.strip()
            if not name:
                raise ValidationException(f"Ingredient {index + 1} needs a name", field="ingredients")
            if ingredient.quantity < 0:
                raise ValidationException(f"Ingredient '{name}' has a negative quantity", field="ingredients")
            cleaned.append({"name": name, "quantity": ingredient.quantity, "unit": ingredient.unit.strip()})
        return cleaned

    def _get_menu_item_for_member(self, menu_item_id: int, user_id: int) -> MenuItem:
        item = self.menu_item_repo.get(menu_item_id)
        if not item:
            raise ResourceNotFoundException("Menu item", menu_item_id)
        if not self.household_repo.is_member(item.household_id, user_id):
            raise AuthorizationException("You must be a member of the household")
        return item
