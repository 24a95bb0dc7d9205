from sqlalchemy import String, ForeignKey, Boolean, Date, Float, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import Optional, List
from datetime import date
from menu_planner.models.base import BaseModel


class ShoppingList(BaseModel):
    """
    Shopping list for a household, covering a date window.
    Can be generated from scheduled meals, from a template, or created empty.
    """

    __tablename__ = "shopping_lists"

    date_range_start: Mapped[date] = mapped_column(Date, nullable=False)
    date_range_end: Mapped[date] = mapped_column(Date, nullable=False)

    household_id: Mapped[int] = mapped_column(
        ForeignKey("households.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_by_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    items: Mapped[List["ShoppingItem"]] = relationship(
        "ShoppingItem",
        back_populates="shopping_list",
        cascade="all, delete-orphan",
        order_by="ShoppingItem.sort_order",
        lazy="selectin",
    )

    @property
    def total_items(self) -> int:
        return len(self.items)

    @property
    def checked_items_count(self) -> int:
        return sum(1 for item in self.items if item.checked)


class ShoppingItem(BaseModel):
    """
    Individual line of a shopping list.
    """

    __tablename__ = "shopping_items"

    ingredient_name: Mapped[str] = mapped_column(String(200), nullable=False)
    quantity: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    unit: Mapped[str] = mapped_column(String(50), nullable=False, default="")

    checked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    added_manually: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    shopping_list_id: Mapped[int] = mapped_column(
        ForeignKey("shopping_lists.id", ondelete="CASCADE"), nullable=False, index=True
    )

    shopping_list: Mapped["ShoppingList"] = relationship(
        "ShoppingList", back_populates="items"
    )

    @property
    def display_quantity(self) -> str:
        """Format quantity for display"""
        if not self.quantity:
            return self.unit
        quantity = int(self.quantity) if self.quantity == int(self.quantity) else self.quantity
        return f"{quantity} {self.unit}".strip()


class ShoppingListTemplate(BaseModel):
    """
    Named, replayable snapshot of shopping items.
    Items are stored as a JSON array; see ShoppingListService for parsing.
    """

    __tablename__ = "shopping_list_templates"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    items: Mapped[str] = mapped_column(Text, nullable=False, default="[]")

    household_id: Mapped[int] = mapped_column(
        ForeignKey("households.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_by_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
