from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class RecipeIngredientCreate(BaseModel):
    """Schema for one ingredient line of a recipe."""
    name: str = Field(..., max_length=200, description="Ingredient name")
    quantity: float = Field(0, ge=0, description="Quantity needed")
    unit: str = Field("", max_length=50, description="Free text unit, may be empty")


class RecipeIngredientResponse(BaseModel):
    id: int
    name: str
    quantity: float
    unit: str

    class Config:
        from_attributes = True


class RecipeBase(BaseModel):
    """Base recipe schema with common fields."""
    instructions: str = Field("", max_length=10000, description="Cooking instructions")
    prep_time: Optional[int] = Field(None, ge=0, le=9999, description="Preparation time in minutes")
    cook_time: Optional[int] = Field(None, ge=0, le=9999, description="Cooking time in minutes")
    servings: int = Field(1, ge=1, le=100, description="Number of servings")


class RecipeCreate(RecipeBase):
    """Schema for creating a recipe for a menu item."""
    menu_item_id: int = Field(..., description="Menu item ID")
    ingredients: List[RecipeIngredientCreate] = Field(default_factory=list, description="Ingredient lines")


class RecipeUpdate(BaseModel):
    """Schema for updating recipe details and, optionally, replacing its ingredients."""
    instructions: Optional[str] = Field(None, max_length=10000)
    prep_time: Optional[int] = Field(None, ge=0, le=9999)
    cook_time: Optional[int] = Field(None, ge=0, le=9999)
    servings: Optional[int] = Field(None, ge=1, le=100)
    ingredients: Optional[List[RecipeIngredientCreate]] = None


class RecipeResponse(RecipeBase):
    """Schema for recipe response with ingredients."""
    id: int
    uuid: str
    menu_item_id: int
    total_time: Optional[int] = None
    ingredients: List[RecipeIngredientResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
