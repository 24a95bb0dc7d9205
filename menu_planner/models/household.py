from sqlalchemy import String, ForeignKey, Float
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import List, Optional, TYPE_CHECKING
from menu_planner.models.base import BaseModel
from menu_planner.models.associations import household_members

if TYPE_CHECKING:
    from menu_planner.models.user import User


class Household(BaseModel):
    """
    A group of users sharing one menu catalog, calendar and shopping lists.
    The head user is the only member allowed to change the popularity threshold.
    """

    __tablename__ = "households"

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    head_user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="RESTRICT"), nullable=False
    )

    # Menu items whose summed vote score drops below this are hidden
    popularity_threshold: Mapped[float] = mapped_column(
        Float, nullable=False, default=-5
    )

    members: Mapped[List["User"]] = relationship(
        "User", secondary=household_members, back_populates="households", lazy="selectin"
    )

    head_user: Mapped[Optional["User"]] = relationship(
        "User", foreign_keys=[head_user_id], lazy="selectin"
    )
