from sqlalchemy.orm import Session
from sqlalchemy import select, func, case
from typing import List, Optional
from menu_planner.models.vote import MenuVote
from menu_planner.models.menu_plan import MenuPlan
from menu_planner.repositories.repository import BaseRepository


class VoteRepository(BaseRepository[MenuVote]):
    """Repository for votes on scheduled meals."""

    def __init__(self, db: Session):
        super().__init__(MenuVote, db)

    def get_user_vote(self, menu_plan_id: int, user_id: int) -> Optional[MenuVote]:
        return (
            self.db.query(MenuVote)
            .filter(MenuVote.menu_plan_id == menu_plan_id, MenuVote.user_id == user_id)
            .first()
        )

    def get_by_menu_plan(self, menu_plan_id: int) -> List[MenuVote]:
        return (
            self.db.query(MenuVote)
            .filter(MenuVote.menu_plan_id == menu_plan_id)
            .order_by(MenuVote.id)
            .all()
        )

    def sum_for_menu_plan(self, menu_plan_id: int) -> int:
        """Sum of vote values on one scheduled meal."""
        stmt = select(func.coalesce(func.sum(MenuVote.value), 0)).where(
            MenuVote.menu_plan_id == menu_plan_id
        )
        return int(self.db.execute(stmt).scalar_one())

    def household_totals(self, household_id: int) -> dict:
        """Vote counts across every scheduled meal of a household."""
        stmt = (
            select(
                func.count(MenuVote.id),
                func.coalesce(func.sum(case((MenuVote.value > 0, 1), else_=0)), 0),
                func.coalesce(func.sum(case((MenuVote.value < 0, 1), else_=0)), 0),
                func.count(func.distinct(MenuVote.user_id)),
            )
            .join(MenuPlan, MenuVote.menu_plan_id == MenuPlan.id)
            .where(MenuPlan.household_id == household_id)
        )
        total, upvotes, downvotes, voters = self.db.execute(stmt).one()
        return {
            "total_votes": int(total),
            "upvotes": int(upvotes),
            "downvotes": int(downvotes),
            "unique_voters": int(voters),
        }
