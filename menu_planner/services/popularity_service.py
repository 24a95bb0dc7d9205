from sqlalchemy.orm import Session
import logging

from menu_planner.models.menu_item import MenuItem
from menu_planner.repositories.menu_item_repository import MenuItemRepository
from menu_planner.repositories.menu_plan_repository import MenuPlanRepository
from menu_planner.repositories.household_repository import HouseholdRepository
from menu_planner.repositories.vote_repository import VoteRepository
from menu_planner.services.vote_service import VoteService
from menu_planner.core.exception import ResourceNotFoundException

logger = logging.getLogger(__name__)


class PopularityService:
    """
    Derives each menu item's popularity from the votes on its scheduled meals.

    An item's score is the sum of the scores of every scheduled instance,
    past or future. The item is hidden whenever that sum falls strictly below
    its household's threshold. Recomputing is idempotent.
    """

    def __init__(self, db: Session):
        self.db = db
        self.menu_item_repo = MenuItemRepository(db)
        self.menu_plan_repo = MenuPlanRepository(db)
        self.household_repo = HouseholdRepository(db)
        self.vote_repo = VoteRepository(db)
        self.vote_service = VoteService(db)

    def recompute_popularity(self, menu_item_id: int) -> MenuItem:
        """
        Recompute and persist popularity_score and is_hidden for one item.

        Raises:
            ResourceNotFoundException: If the menu item does not exist
        """
        item = self._get_item(menu_item_id)
        household = self.household_repo.get(item.household_id)
        if not household:
            raise ResourceNotFoundException("Household", item.household_id)

        self._apply_score(item, household.popularity_threshold)
        self.db.commit()
        self.db.refresh(item)

        logger.info(
            "Recomputed popularity for menu item %s: score=%s hidden=%s",
            item.id, item.popularity_score, item.is_hidden,
        )
        return item

    def recompute_household(self, household_id: int) -> int:
        """
        Re-apply the visibility rule to every item of a household.

        Returns:
            Number of items recomputed
        """
        household = self.household_repo.get(household_id)
        if not household:
            raise ResourceNotFoundException("Household", household_id)

        items = self.menu_item_repo.get_by_household(household_id, include_hidden=True)
        for item in items:
            self._apply_score(item, household.popularity_threshold)

        self.db.commit()
        logger.info("Recomputed popularity for %s items in household %s", len(items), household_id)
        return len(items)

    def hide_menu_item(self, menu_item_id: int) -> MenuItem:
        """Hide an item by hand. The next recompute may reveal it again."""
        return self._set_hidden(menu_item_id, True)

    def restore_menu_item(self, menu_item_id: int) -> MenuItem:
        """Show an item by hand. The next recompute may hide it again."""
        return self._set_hidden(menu_item_id, False)

    def permanently_delete_menu_item(self, menu_item_id: int) -> dict:
        """
        Delete an item together with its scheduled meals, their votes,
        its recipe and its side links.
        """
        item = self._get_item(menu_item_id)
        name = item.name
        self.db.delete(item)
        self.db.commit()

        logger.info("Permanently deleted menu item %s (%s)", menu_item_id, name)
        return {"message": f"Menu item '{name}' deleted permanently"}

    def household_statistics(self, household_id: int) -> dict:
        """Leaderboard of visible items plus household-wide vote totals."""
        totals = self.vote_repo.household_totals(household_id)
        return {
            "household_id": household_id,
            **totals,
            "top_items": self.menu_item_repo.get_popularity_leaderboard(household_id, limit=10),
        }

    def _apply_score(self, item: MenuItem, threshold: float) -> None:
        plans = self.menu_plan_repo.get_by_menu_item(item.id)
        score = sum(self.vote_service.score_of(plan.id) for plan in plans)
        item.popularity_score = score
        item.is_hidden = score < threshold

    def _set_hidden(self, menu_item_id: int, hidden: bool) -> MenuItem:
        item = self._get_item(menu_item_id)
        item.is_hidden = hidden
        self.db.commit()
        self.db.refresh(item)
        return item

    def _get_item(self, menu_item_id: int) -> MenuItem:
        item = self.menu_item_repo.get(menu_item_id)
        if not item:
            raise ResourceNotFoundException("Menu item", menu_item_id)
        return item
