from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date as date_type
from menu_planner.models.menu_plan import MealType


class MenuPlanCreate(BaseModel):
    """Schema for scheduling a menu item into a calendar slot."""
    household_id: int = Field(..., description="Household ID")
    date: date_type = Field(..., description="Calendar date")
    meal_type: MealType = Field(..., description="Meal slot")
    menu_item_id: int = Field(..., description="Entree to schedule")
    side_id: Optional[int] = Field(None, description="Optional side")


class MenuPlanUpdate(BaseModel):
    """Schema for changing the entree or side of a scheduled meal."""
    menu_item_id: Optional[int] = None
    side_id: Optional[int] = None
    clear_side: bool = Field(False, description="Remove the side from this meal")


class MenuPlanMove(BaseModel):
    """Schema for moving a scheduled meal to another slot (swaps with any occupant)."""
    date: date_type
    meal_type: MealType


class MenuPlanResponse(BaseModel):
    """Schema for scheduled meal response."""
    id: int
    uuid: str
    household_id: int
    date: date_type
    meal_type: MealType
    menu_item_id: int
    menu_item_name: Optional[str] = None
    side_id: Optional[int] = None
    side_name: Optional[str] = None
    vote_score: int = 0
    created_by_id: Optional[int] = None

    class Config:
        from_attributes = True


class MenuPlanMoveResponse(BaseModel):
    """Both plans touched by a move; ``swapped`` is None when the target slot was empty."""
    moved: MenuPlanResponse
    swapped: Optional[MenuPlanResponse] = None


class MenuPlanListResponse(BaseModel):
    start_date: date_type
    end_date: date_type
    plans: List[MenuPlanResponse]
