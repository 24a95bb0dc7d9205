from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from menu_planner.models.menu_plan import MenuPlan
from menu_planner.models.vote import MenuVote, UPVOTE, DOWNVOTE
from menu_planner.repositories.vote_repository import VoteRepository
from menu_planner.repositories.menu_plan_repository import MenuPlanRepository
from menu_planner.repositories.household_repository import HouseholdRepository
from menu_planner.core.exception import (
    ResourceNotFoundException,
    AuthorizationException,
    ValidationException,
)

logger = logging.getLogger(__name__)


class VoteService:
    """
    Ledger of member votes on scheduled meals.

    Each member holds at most one vote per scheduled meal. Casting the same
    value again removes the vote; casting the opposite value replaces it.
    Popularity is not recomputed here, see PopularityService.
    """

    def __init__(self, db: Session):
        self.db = db
        self.vote_repo = VoteRepository(db)
        self.menu_plan_repo = MenuPlanRepository(db)
        self.household_repo = HouseholdRepository(db)

    def cast_vote(self, menu_plan_id: int, user_id: int, value: int) -> Optional[MenuVote]:
        """
        Cast, toggle off, or flip a vote.

        Args:
            menu_plan_id: Scheduled meal being voted on
            user_id: Voting user
            value: +1 or -1

        Returns:
            The vote now held by the user, or None if the vote was removed

        Raises:
            ValidationException: If value is not +1 or -1
            ResourceNotFoundException: If the scheduled meal does not exist
            AuthorizationException: If user is not a member of the meal's household
        """
        if value not in (UPVOTE, DOWNVOTE):
            raise ValidationException("Vote value must be 1 or -1", field="value")

        self._get_plan_for_member(menu_plan_id, user_id)

        existing = self.vote_repo.get_user_vote(menu_plan_id, user_id)

        if existing is None:
            vote = MenuVote(menu_plan_id=menu_plan_id, user_id=user_id, value=value)
            return self.vote_repo.create(vote)

        if existing.value == value:
            self.vote_repo.delete(existing.id)
            return None

        # Delete must reach the database before the insert or the unique
        # (menu_plan_id, user_id) constraint trips; both land in one commit.
        self.db.delete(existing)
        self.db.flush()
        vote = MenuVote(menu_plan_id=menu_plan_id, user_id=user_id, value=value)
        self.db.add(vote)
        self.db.commit()
        self.db.refresh(vote)
        return vote

    def score_of(self, menu_plan_id: int) -> int:
        """Sum of all vote values on a scheduled meal."""
        return self.vote_repo.sum_for_menu_plan(menu_plan_id)

    def get_votes(self, menu_plan_id: int, user_id: int) -> List[MenuVote]:
        """List votes on a scheduled meal."""
        self._get_plan_for_member(menu_plan_id, user_id)
        return self.vote_repo.get_by_menu_plan(menu_plan_id)

    def get_user_vote_value(self, menu_plan_id: int, user_id: int) -> Optional[int]:
        vote = self.vote_repo.get_user_vote(menu_plan_id, user_id)
        return vote.value if vote else None

    def _get_plan_for_member(self, menu_plan_id: int, user_id: int) -> MenuPlan:
        plan = self.menu_plan_repo.get(menu_plan_id)
        if not plan:
            raise ResourceNotFoundException("Menu plan", menu_plan_id)

        if not self.household_repo.is_member(plan.household_id, user_id):
            raise AuthorizationException("You must be a member of the household")

        return plan
