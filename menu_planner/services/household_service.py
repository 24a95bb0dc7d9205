from sqlalchemy.orm import Session
from sqlalchemy import insert
from typing import Any, Dict, List
import json
import logging
import math

from menu_planner.config import settings
from menu_planner.models.household import Household
from menu_planner.models.ai_preferences import AIPreferences
from menu_planner.models.associations import household_members
from menu_planner.repositories.household_repository import HouseholdRepository, HEAD_ROLE, MEMBER_ROLE
from menu_planner.repositories.ai_preferences_repository import AIPreferencesRepository
from menu_planner.schemas.household import HouseholdCreate, AIPreferencesUpdate
from menu_planner.services.popularity_service import PopularityService
from menu_planner.core.exception import (
    ResourceNotFoundException,
    AuthorizationException,
    ValidationException,
    DuplicateResourceException,
)

logger = logging.getLogger(__name__)


def parse_threshold(value: Any) -> float:
    """
    Parse a popularity threshold from user input.

    Raises:
        ValidationException: If the value is not a finite number
    """
    if isinstance(value, bool):
        raise ValidationException("Threshold must be a valid number", field="threshold")
    try:
        threshold = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        raise ValidationException("Threshold must be a valid number", field="threshold")

    if math.isnan(threshold) or math.isinf(threshold):
        raise ValidationException("Threshold must be a valid number", field="threshold")
    return threshold


class HouseholdService:
    """Service layer for household operations."""

    def __init__(self, db: Session):
        self.db = db
        self.household_repo = HouseholdRepository(db)
        self.preferences_repo = AIPreferencesRepository(db)

    def create_household(self, user_id: int, data: HouseholdCreate) -> Household:
        """
        Create a new household with the user as head.

        Args:
            user_id: ID of user creating the household
            data: Household creation data

        Returns:
            Created household
        """
        household = Household(
            name=data.name,
            head_user_id=user_id,
            popularity_threshold=settings.DEFAULT_POPULARITY_THRESHOLD,
        )
        self.db.add(household)
        self.db.flush()

        self.db.execute(
            insert(household_members).values(
                user_id=user_id, household_id=household.id, role=HEAD_ROLE
            )
        )
        self.db.commit()
        self.db.refresh(household)

        logger.info("User %s created household %s", user_id, household.id)
        return household

    def join_household(self, household_id: int, user_id: int) -> Household:
        """
        Join a household as a regular member.

        Raises:
            ResourceNotFoundException: If household not found
            DuplicateResourceException: If already a member
        """
        household = self.household_repo.get(household_id)
        if not household:
            raise ResourceNotFoundException("Household", household_id)

        if not self.household_repo.add_member(household_id, user_id, role=MEMBER_ROLE):
            raise DuplicateResourceException("Household membership")

        self.db.refresh(household)
        return household

    def get_user_households(self, user_id: int) -> List[Household]:
        """Get all households a user belongs to."""
        return self.household_repo.get_user_households(user_id)

    def get_household(self, household_id: int, user_id: int) -> dict:
        """
        Get household details with members.

        Raises:
            AuthorizationException: If user is not a member
            ResourceNotFoundException: If household not found
        """
        household = self._get_for_member(household_id, user_id)
        members = self.household_repo.get_members(household_id)
        return {
            "id": household.id,
            "uuid": household.uuid,
            "name": household.name,
            "head_user_id": household.head_user_id,
            "popularity_threshold": household.popularity_threshold,
            "created_at": household.created_at,
            "updated_at": household.updated_at,
            "member_count": len(members),
            "members": members,
        }

    def get_household_members(self, household_id: int, user_id: int) -> List[dict]:
        self._get_for_member(household_id, user_id)
        return self.household_repo.get_members(household_id)

    def update_threshold(self, household_id: int, user_id: int, value: Any) -> Household:
        """
        Change the popularity threshold and re-apply it to every menu item.

        Args:
            household_id: Household ID
            user_id: Requesting user, must be the head
            value: Raw threshold input

        Raises:
            ValidationException: If value is not a finite number
            AuthorizationException: If user is not the head
        """
        threshold = parse_threshold(value)

        household = self._get_for_member(household_id, user_id)
        if household.head_user_id != user_id:
            raise AuthorizationException("Only the household head can change the popularity threshold")

        household.popularity_threshold = threshold
        self.db.commit()

        PopularityService(self.db).recompute_household(household_id)
        self.db.refresh(household)

        logger.info("Household %s popularity threshold set to %s", household_id, threshold)
        return household

    def get_statistics(self, household_id: int, user_id: int) -> dict:
        """Popularity leaderboard and vote totals for a household."""
        self._get_for_member(household_id, user_id)
        return PopularityService(self.db).household_statistics(household_id)

    # ===== AI preferences =====

    def get_ai_preferences(self, household_id: int, user_id: int) -> dict:
        """Saved menu generation defaults, empty when none were saved."""
        self._get_for_member(household_id, user_id)
        preferences = self.preferences_repo.get_by_household(household_id)
        if not preferences:
            return {"household_id": household_id, "dietary_instructions": "", "genre_weights": {}}

        return {
            "household_id": household_id,
            "dietary_instructions": preferences.dietary_instructions,
            "genre_weights": self._parse_genre_weights(preferences.genre_weights, household_id),
        }

    def save_ai_preferences(self, household_id: int, user_id: int, data: AIPreferencesUpdate) -> dict:
        self._get_for_member(household_id, user_id)
        preferences = self.preferences_repo.get_by_household(household_id)
        if preferences is None:
            preferences = AIPreferences(household_id=household_id)
            self.db.add(preferences)

        preferences.dietary_instructions = data.dietary_instructions
        preferences.genre_weights = json.dumps(data.genre_weights)
        self.db.commit()

        return {
            "household_id": household_id,
            "dietary_instructions": data.dietary_instructions,
            "genre_weights": data.genre_weights,
        }

    @staticmethod
    def _parse_genre_weights(raw: str, household_id: int) -> Dict[str, float]:
        try:
            parsed = json.loads(raw or "{}")
        except json.JSONDecodeError:
            logger.warning("Household %s has unparseable genre weights", household_id)
            return {}
        return parsed if isinstance(parsed, dict) else {}

    def _get_for_member(self, household_id: int, user_id: int) -> Household:
        household = self.household_repo.get(household_id)
        if not household:
            raise ResourceNotFoundException("Household", household_id)

        if not self.household_repo.is_member(household_id, user_id):
            raise AuthorizationException("You must be a member of this household")

        return household
