from sqlalchemy.orm import Session
from sqlalchemy import select, and_, insert, delete
from typing import List
from menu_planner.models.side import Side
from menu_planner.models.associations import entree_sides
from menu_planner.repositories.repository import BaseRepository


class SideRepository(BaseRepository[Side]):
    """Repository for side dish operations."""

    def __init__(self, db: Session):
        super().__init__(Side, db)

    def get_by_household(self, household_id: int, include_hidden: bool = False) -> List[Side]:
        query = self.db.query(Side).filter(Side.household_id == household_id)
        if not include_hidden:
            query = query.filter(Side.is_hidden == False)
        return query.order_by(Side.name, Side.id).all()

    def get_entree_sides(self, entree_id: int) -> List[Side]:
        """Get the sides configured as eligible for an entree."""
        stmt = (
            select(Side)
            .join(entree_sides, Side.id == entree_sides.c.side_id)
            .where(entree_sides.c.entree_id == entree_id)
            .order_by(Side.name, Side.id)
        )
        return list(self.db.execute(stmt).scalars().all())

    def is_assigned(self, entree_id: int, side_id: int) -> bool:
        stmt = select(entree_sides).where(
            and_(entree_sides.c.entree_id == entree_id, entree_sides.c.side_id == side_id)
        )
        return self.db.execute(stmt).first() is not None

    def assign(self, entree_id: int, side_id: int) -> bool:
        """
        Link a side to an entree.

        Returns:
            True if linked, False if the link already existed
        """
        if self.is_assigned(entree_id, side_id):
            return False

        self.db.execute(insert(entree_sides).values(entree_id=entree_id, side_id=side_id))
        self.db.commit()
        self.db.expire_all()
        return True

    def unassign(self, entree_id: int, side_id: int) -> bool:
        """
        Remove a side from an entree.

        Returns:
            True if removed, False if it was not linked
        """
        if not self.is_assigned(entree_id, side_id):
            return False

        self.db.execute(
            delete(entree_sides).where(
                and_(entree_sides.c.entree_id == entree_id, entree_sides.c.side_id == side_id)
            )
        )
        self.db.commit()
        self.db.expire_all()
        return True
