from pydantic import BaseModel, Field
from typing import Optional, Literal


class VoteRequest(BaseModel):
    """Schema for casting a vote. Repeating the same value removes the vote."""
    value: Literal[1, -1] = Field(..., description="+1 to upvote, -1 to downvote")


class VoteResponse(BaseModel):
    id: int
    menu_plan_id: int
    user_id: int
    value: int

    class Config:
        from_attributes = True


class VoteResultResponse(BaseModel):
    """State after a vote has been cast and popularity recomputed."""
    menu_plan_id: int
    menu_item_id: int
    score: int
    user_vote: Optional[int] = None
    popularity_score: int
    is_hidden: bool
