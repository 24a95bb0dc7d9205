from sqlalchemy.orm import Session
from sqlalchemy import select, and_, insert
from typing import List, Optional
from menu_planner.models.household import Household
from menu_planner.models.user import User
from menu_planner.models.associations import household_members
from menu_planner.repositories.repository import BaseRepository

HEAD_ROLE = "head"
MEMBER_ROLE = "member"


class HouseholdRepository(BaseRepository[Household]):
    """Repository for household operations."""

    def __init__(self, db: Session):
        super().__init__(Household, db)

    def get_user_households(self, user_id: int) -> List[Household]:
        """Get all households a user belongs to."""
        stmt = (
            select(Household)
            .join(household_members)
            .where(household_members.c.user_id == user_id)
            .order_by(Household.created_at.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def add_member(self, household_id: int, user_id: int, role: str = MEMBER_ROLE) -> bool:
        """
        Add a member to a household.

        Args:
            household_id: The household ID
            user_id: The user ID to add
            role: Role in the household ('head' or 'member')

        Returns:
            True if successful, False if already a member
        """
        if self.is_member(household_id, user_id):
            return False

        stmt = insert(household_members).values(
            user_id=user_id,
            household_id=household_id,
            role=role
        )
        self.db.execute(stmt)
        self.db.commit()
        return True

    def get_members(self, household_id: int) -> List[dict]:
        """
        Get all members of a household with their roles.

        Returns:
            List of dicts with user info and role
        """
        stmt = (
            select(
                User.id,
                User.email,
                User.name,
                household_members.c.role,
                household_members.c.joined_at
            )
            .join(household_members, User.id == household_members.c.user_id)
            .where(household_members.c.household_id == household_id)
            .order_by(household_members.c.joined_at, User.id)
        )

        results = self.db.execute(stmt).all()
        return [
            {
                "user_id": r.id,
                "email": r.email,
                "name": r.name,
                "role": r.role,
                "joined_at": r.joined_at
            }
            for r in results
        ]

    def get_member_role(self, household_id: int, user_id: int) -> Optional[str]:
        """Get the role of a user in a household."""
        stmt = select(household_members.c.role).where(
            and_(
                household_members.c.household_id == household_id,
                household_members.c.user_id == user_id
            )
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def is_member(self, household_id: int, user_id: int) -> bool:
        """Check if a user is a member of a household."""
        return self.get_member_role(household_id, user_id) is not None
