from sqlalchemy.orm import Session
from sqlalchemy import select, func, case
from typing import List
from menu_planner.models.menu_item import MenuItem
from menu_planner.models.menu_plan import MenuPlan
from menu_planner.models.vote import MenuVote
from menu_planner.repositories.repository import BaseRepository


class MenuItemRepository(BaseRepository[MenuItem]):
    """Repository for menu item (entree) operations."""

    def __init__(self, db: Session):
        super().__init__(MenuItem, db)

    def get_by_household(self, household_id: int, include_hidden: bool = False) -> List[MenuItem]:
        """Get a household's menu items, visible ones only unless asked otherwise."""
        query = self.db.query(MenuItem).filter(MenuItem.household_id == household_id)
        if not include_hidden:
            query = query.filter(MenuItem.is_hidden == False)
        return query.order_by(MenuItem.name, MenuItem.id).all()

    def get_popularity_leaderboard(self, household_id: int, limit: int = 10) -> List[dict]:
        """
        Most popular visible items with how often they were planned and voted on.
        """
        upvotes = func.coalesce(func.sum(case((MenuVote.value > 0, 1), else_=0)), 0)
        downvotes = func.coalesce(func.sum(case((MenuVote.value < 0, 1), else_=0)), 0)
        stmt = (
            select(
                MenuItem.id,
                MenuItem.name,
                MenuItem.genre,
                MenuItem.popularity_score,
                func.count(func.distinct(MenuPlan.id)).label("times_planned"),
                upvotes.label("upvotes"),
                downvotes.label("downvotes"),
            )
            .outerjoin(MenuPlan, MenuPlan.menu_item_id == MenuItem.id)
            .outerjoin(MenuVote, MenuVote.menu_plan_id == MenuPlan.id)
            .where(MenuItem.household_id == household_id, MenuItem.is_hidden == False)
            .group_by(MenuItem.id, MenuItem.name, MenuItem.genre, MenuItem.popularity_score)
            .order_by(MenuItem.popularity_score.desc(), MenuItem.name)
            .limit(limit)
        )
        return [
            {
                "menu_item_id": r.id,
                "name": r.name,
                "genre": r.genre.value,
                "popularity_score": r.popularity_score,
                "times_planned": int(r.times_planned),
                "upvotes": int(r.upvotes),
                "downvotes": int(r.downvotes),
            }
            for r in self.db.execute(stmt).all()
        ]
