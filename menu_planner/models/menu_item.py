from sqlalchemy import String, ForeignKey, Integer, Boolean, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import List, Optional, TYPE_CHECKING
import enum
from menu_planner.models.base import BaseModel
from menu_planner.models.associations import entree_sides
if TYPE_CHECKING:
    from menu_planner.models.household import Household
    from menu_planner.models.side import Side
    from menu_planner.models.recipe import Recipe
    from menu_planner.models.menu_plan import MenuPlan


class MenuGenre(str, enum.Enum):
    """Cuisine genres used for AI genre weighting"""

    ITALIAN = "Italian"
    MEXICAN = "Mexican"
    ASIAN = "Asian"
    AMERICAN = "American"
    OTHER = "Other"


class MenuItem(BaseModel):
    """
    An entree in the household catalog.

    popularity_score and is_hidden are derived from votes by the popularity
    service; members may still hide or restore an item by hand.
    """

    __tablename__ = "menu_items"

    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    genre: Mapped[MenuGenre] = mapped_column(
        SQLEnum(MenuGenre), nullable=False, default=MenuGenre.OTHER
    )

    popularity_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_hidden: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    household_id: Mapped[int] = mapped_column(
        ForeignKey("households.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_by_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    household: Mapped["Household"] = relationship("Household", lazy="selectin")

    sides: Mapped[List["Side"]] = relationship(
        "Side", secondary=entree_sides, back_populates="entrees", lazy="selectin"
    )

    recipe: Mapped[Optional["Recipe"]] = relationship(
        "Recipe",
        back_populates="menu_item",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    menu_plans: Mapped[List["MenuPlan"]] = relationship(
        "MenuPlan",
        back_populates="menu_item",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
