from pydantic import BaseModel, Field, model_validator
from typing import Optional, List
from datetime import date, datetime


class ShoppingItemCreate(BaseModel):
    """Schema for adding an item to a list by hand."""
    ingredient_name: str = Field(..., max_length=200, description="Item name")
    quantity: float = Field(0, ge=0, description="Quantity needed")
    unit: str = Field("", max_length=50, description="Unit of measurement")


class ShoppingItemUpdate(BaseModel):
    """Schema for updating a shopping item."""
    ingredient_name: Optional[str] = Field(None, max_length=200)
    quantity: Optional[float] = Field(None, ge=0)
    unit: Optional[str] = Field(None, max_length=50)
    checked: Optional[bool] = None


class ShoppingItemResponse(BaseModel):
    """Schema for shopping item response."""
    id: int
    uuid: str
    shopping_list_id: int
    ingredient_name: str
    quantity: float
    unit: str
    checked: bool
    added_manually: bool
    sort_order: int

    class Config:
        from_attributes = True


class ShoppingListCreate(BaseModel):
    """Schema for creating an empty shopping list."""
    household_id: int = Field(..., description="Household ID")
    date_range_start: date
    date_range_end: date

    @model_validator(mode='after')
    def validate_range(self):
        """End date cannot precede start date"""
        if self.date_range_end < self.date_range_start:
            raise ValueError("date_range_end must not be before date_range_start")
        return self


class GenerateShoppingListRequest(BaseModel):
    """Schema for generating a list from a week of scheduled meals."""
    household_id: int = Field(..., description="Household ID")
    week_start: date = Field(..., description="First day of the seven day window")


class ShoppingListResponse(BaseModel):
    """Schema for shopping list response with items."""
    id: int
    uuid: str
    household_id: int
    date_range_start: date
    date_range_end: date
    created_by_id: Optional[int]
    total_items: int = 0
    checked_items_count: int = 0
    items: List[ShoppingItemResponse] = []
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ShoppingListSummary(BaseModel):
    """Schema for shopping list listing (without items)."""
    id: int
    uuid: str
    household_id: int
    date_range_start: date
    date_range_end: date
    total_items: int = 0
    checked_items_count: int = 0
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ReorderRequest(BaseModel):
    """Drop ``dragged_item_id`` onto the position of ``target_item_id``."""
    dragged_item_id: int
    target_item_id: int


class ShoppingListExport(BaseModel):
    shopping_list_id: int
    content: str


class TemplateItem(BaseModel):
    """One stored line of a template. Templates never carry checked items."""
    ingredient_name: str
    quantity: float = 0
    unit: str = ""
    added_manually: bool = False
    checked: bool = False


class TemplateCreate(BaseModel):
    """Schema for saving a list as a template."""
    name: str = Field(..., max_length=200, description="Template name")


class TemplateResponse(BaseModel):
    id: int
    uuid: str
    household_id: int
    name: str
    items: List[TemplateItem]
    created_at: Optional[datetime] = None


class TemplateApplyRequest(BaseModel):
    """Schema for replaying a template onto an existing list."""
    shopping_list_id: int


class ListFromTemplateRequest(BaseModel):
    """Schema for creating a new list from a template."""
    date_range_start: date
    date_range_end: date
