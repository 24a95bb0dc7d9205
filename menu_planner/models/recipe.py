from sqlalchemy import String, Integer, Text, ForeignKey, Float
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import List, Optional, TYPE_CHECKING
from menu_planner.models.base import BaseModel
if TYPE_CHECKING:
    from menu_planner.models.menu_item import MenuItem


class Recipe(BaseModel):
    """
    Cooking instructions for a menu item. A menu item has at most one recipe.
    """

    __tablename__ = "recipes"

    instructions: Mapped[str] = mapped_column(Text, nullable=False, default="")
    prep_time: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, default=None)
    cook_time: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, default=None)
    servings: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    menu_item_id: Mapped[int] = mapped_column(
        ForeignKey("menu_items.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )

    menu_item: Mapped["MenuItem"] = relationship(
        "MenuItem", back_populates="recipe", lazy="selectin"
    )

    ingredients: Mapped[List["RecipeIngredient"]] = relationship(
        "RecipeIngredient",
        back_populates="recipe",
        cascade="all, delete-orphan",
        order_by="RecipeIngredient.id",
        lazy="selectin",
    )

    @property
    def total_time(self) -> Optional[int]:
        """Calculate total cooking time"""
        if self.prep_time is not None and self.cook_time is not None:
            return self.prep_time + self.cook_time
        return None


class RecipeIngredient(BaseModel):
    """One free-text ingredient line of a recipe."""

    __tablename__ = "recipe_ingredients"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    quantity: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    unit: Mapped[str] = mapped_column(String(50), nullable=False, default="")

    recipe_id: Mapped[int] = mapped_column(
        ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False, index=True
    )

    recipe: Mapped["Recipe"] = relationship("Recipe", back_populates="ingredients")
