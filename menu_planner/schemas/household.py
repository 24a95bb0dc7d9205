from pydantic import BaseModel, Field, StrictFloat, StrictInt, StrictStr
from typing import Optional, List, Union
from datetime import datetime


class HouseholdBase(BaseModel):
    """Base household schema with common fields."""
    name: str = Field(..., min_length=1, max_length=100, description="Household name")


class HouseholdCreate(HouseholdBase):
    """Schema for creating a new household."""
    pass


class HouseholdMemberResponse(BaseModel):
    """Schema for household member information."""
    user_id: int
    name: str
    email: str
    role: str = Field(..., description="Member role: 'head' or 'member'")
    joined_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class HouseholdResponse(HouseholdBase):
    """Schema for household response."""
    id: int
    uuid: str
    head_user_id: int
    popularity_threshold: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class HouseholdDetailResponse(HouseholdResponse):
    """Schema for household details including its members."""
    member_count: int
    members: List[HouseholdMemberResponse]


class ThresholdUpdate(BaseModel):
    """
    Schema for changing the popularity threshold.
    Accepts raw text so the numeric check happens in one place, in the service.
    """
    threshold: Union[StrictInt, StrictFloat, StrictStr] = Field(..., description="New threshold, e.g. -5")


class AIPreferencesUpdate(BaseModel):
    """Schema for saving menu generation defaults."""
    dietary_instructions: str = Field("", max_length=2000)
    genre_weights: dict[str, float] = Field(default_factory=dict)


class AIPreferencesResponse(BaseModel):
    """Schema for saved menu generation defaults."""
    household_id: int
    dietary_instructions: str
    genre_weights: dict[str, float]


class PopularItemStat(BaseModel):
    """One row of the household popularity leaderboard."""
    menu_item_id: int
    name: str
    genre: str
    popularity_score: int
    times_planned: int
    upvotes: int
    downvotes: int


class HouseholdStatistics(BaseModel):
    """Vote statistics for a household."""
    household_id: int
    total_votes: int
    upvotes: int
    downvotes: int
    unique_voters: int
    top_items: List[PopularItemStat]
