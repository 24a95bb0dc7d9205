from menu_planner.models.base import Base, BaseModel
from menu_planner.models.associations import household_members, entree_sides
from menu_planner.models.user import User
from menu_planner.models.household import Household
from menu_planner.models.menu_item import MenuItem, MenuGenre
from menu_planner.models.side import Side
from menu_planner.models.recipe import Recipe, RecipeIngredient
from menu_planner.models.menu_plan import MenuPlan, MealType
from menu_planner.models.vote import MenuVote, UPVOTE, DOWNVOTE
from menu_planner.models.shopping_list import (
    ShoppingList,
    ShoppingItem,
    ShoppingListTemplate,
)
from menu_planner.models.ai_preferences import AIPreferences

__all__ = [
    # Base
    "Base",
    "BaseModel",
    # Associations
    "household_members",
    "entree_sides",
    # Household
    "User",
    "Household",
    # Catalog
    "MenuItem",
    "MenuGenre",
    "Side",
    "Recipe",
    "RecipeIngredient",
    # Calendar
    "MenuPlan",
    "MealType",
    "MenuVote",
    "UPVOTE",
    "DOWNVOTE",
    # Shopping
    "ShoppingList",
    "ShoppingItem",
    "ShoppingListTemplate",
    # AI
    "AIPreferences",
]
