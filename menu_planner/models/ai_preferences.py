from sqlalchemy import ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column
from menu_planner.models.base import BaseModel


class AIPreferences(BaseModel):
    """
    Saved menu generation defaults for a household.
    genre_weights holds a JSON object such as {"Italian": 1.0, "Mexican": 0.8}.
    """

    __tablename__ = "ai_preferences"

    dietary_instructions: Mapped[str] = mapped_column(Text, nullable=False, default="")
    genre_weights: Mapped[str] = mapped_column(Text, nullable=False, default="{}")

    household_id: Mapped[int] = mapped_column(
        ForeignKey("households.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
