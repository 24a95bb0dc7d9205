from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from menu_planner.models.menu_item import MenuGenre


class MenuItemCreate(BaseModel):
    """Schema for creating a menu item."""
    household_id: int = Field(..., description="Household ID")
    name: str = Field(..., min_length=1, max_length=200, description="Entree name")
    genre: MenuGenre = Field(MenuGenre.OTHER, description="Cuisine genre")


class MenuItemUpdate(BaseModel):
    """Schema for updating a menu item. Popularity is never written here."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    genre: Optional[MenuGenre] = None


class MenuItemResponse(BaseModel):
    """Schema for menu item response."""
    id: int
    uuid: str
    household_id: int
    name: str
    genre: MenuGenre
    popularity_score: int
    is_hidden: bool
    created_by_id: Optional[int]
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
