from sqlalchemy import String
from sqlalchemy.orm import relationship, Mapped, mapped_column
from typing import List, TYPE_CHECKING
from menu_planner.models.base import BaseModel
from menu_planner.models.associations import household_members
if TYPE_CHECKING:
    from menu_planner.models.household import Household


class User(BaseModel):
    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(100))

    households: Mapped[List["Household"]] = relationship(
        "Household",
        secondary=household_members,
        back_populates="members",
        lazy="selectin"
    )
