from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class SideCreate(BaseModel):
    """Schema for creating a side dish."""
    household_id: int = Field(..., description="Household ID")
    name: str = Field(..., min_length=1, max_length=200, description="Side name")


class SideUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)


class SideResponse(BaseModel):
    """Schema for side dish response."""
    id: int
    uuid: str
    household_id: int
    name: str
    is_hidden: bool
    created_by_id: Optional[int]
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
