from sqlalchemy import Date, ForeignKey, Integer, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import List, Optional, TYPE_CHECKING
from datetime import date
import enum
from menu_planner.models.base import BaseModel
if TYPE_CHECKING:
    from menu_planner.models.menu_item import MenuItem
    from menu_planner.models.side import Side
    from menu_planner.models.vote import MenuVote


class MealType(str, enum.Enum):
    """Calendar slots within a day"""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"


class MenuPlan(BaseModel):
    """
    A menu item scheduled into one (date, meal type) slot of a household calendar.
    """

    __tablename__ = "menu_plans"
    __table_args__ = (
        UniqueConstraint("household_id", "date", "meal_type", name="uq_menu_plan_slot"),
    )

    date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    meal_type: Mapped[MealType] = mapped_column(SQLEnum(MealType), nullable=False)

    household_id: Mapped[int] = mapped_column(
        ForeignKey("households.id", ondelete="CASCADE"), nullable=False, index=True
    )
    menu_item_id: Mapped[int] = mapped_column(
        ForeignKey("menu_items.id", ondelete="CASCADE"), nullable=False, index=True
    )
    side_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("sides.id", ondelete="SET NULL"), nullable=True, default=None
    )
    created_by_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    menu_item: Mapped["MenuItem"] = relationship(
        "MenuItem", back_populates="menu_plans", lazy="selectin"
    )
    side: Mapped[Optional["Side"]] = relationship("Side", lazy="selectin")

    votes: Mapped[List["MenuVote"]] = relationship(
        "MenuVote",
        back_populates="menu_plan",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )

    @property
    def menu_item_name(self) -> Optional[str]:
        return self.menu_item.name if self.menu_item else None

    @property
    def side_name(self) -> Optional[str]:
        return self.side.name if self.side else None

    @property
    def vote_score(self) -> int:
        return sum(vote.value for vote in self.votes)
