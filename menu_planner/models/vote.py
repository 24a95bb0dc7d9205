from sqlalchemy import ForeignKey, SmallInteger, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from menu_planner.models.base import BaseModel
if TYPE_CHECKING:
    from menu_planner.models.menu_plan import MenuPlan


UPVOTE = 1
DOWNVOTE = -1


class MenuVote(BaseModel):
    """A single member's up or down vote on one scheduled meal."""

    __tablename__ = "menu_votes"
    __table_args__ = (
        UniqueConstraint("menu_plan_id", "user_id", name="uq_menu_vote_user"),
    )

    value: Mapped[int] = mapped_column(SmallInteger, nullable=False)

    menu_plan_id: Mapped[int] = mapped_column(
        ForeignKey("menu_plans.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    menu_plan: Mapped["MenuPlan"] = relationship("MenuPlan", back_populates="votes")
