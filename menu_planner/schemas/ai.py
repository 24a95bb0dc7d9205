from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date as date_type
from menu_planner.models.menu_plan import MealType
from menu_planner.schemas.menu_plan import MenuPlanResponse


class MealSelection(BaseModel):
    """One calendar slot the generator should fill."""
    date: date_type
    meal_type: MealType


class GenerateMenuRequest(BaseModel):
    """
    Schema for AI menu generation.

    Omitted dietary instructions or genre weights fall back to the household's
    saved preferences.
    """
    household_id: int = Field(..., description="Household ID")
    selections: List[MealSelection] = Field(..., description="Slots to fill")
    dietary_instructions: Optional[str] = Field(None, max_length=2000)
    genre_weights: Optional[dict[str, float]] = None
    overwrite: bool = Field(False, description="Replace meals already scheduled in the selected slots")


class CatalogEntry(BaseModel):
    """A visible menu item as offered to the generator."""
    id: int
    name: str
    genre: str
    popularity_score: int


class ProposedMeal(BaseModel):
    """A raw (date, meal type, item name) triple returned by the generator."""
    date: str
    meal_type: str
    menu_item_name: str


class GenerateMenuResponse(BaseModel):
    household_id: int
    created: List[MenuPlanResponse]
    replaced_count: int = 0
    dropped_count: int = 0
    exclusions: List[str] = []


class GenerationContextResponse(BaseModel):
    """Catalog and recently served names the generator would receive."""
    household_id: int
    catalog: List[CatalogEntry]
    exclusions: List[str]
