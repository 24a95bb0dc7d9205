from sqlalchemy import String, ForeignKey, Boolean
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import List, Optional, TYPE_CHECKING
from menu_planner.models.base import BaseModel
from menu_planner.models.associations import entree_sides
if TYPE_CHECKING:
    from menu_planner.models.menu_item import MenuItem


class Side(BaseModel):
    """A side dish that can accompany scheduled entrees."""

    __tablename__ = "sides"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    is_hidden: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    household_id: Mapped[int] = mapped_column(
        ForeignKey("households.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_by_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    entrees: Mapped[List["MenuItem"]] = relationship(
        "MenuItem", secondary=entree_sides, back_populates="sides", lazy="selectin"
    )
