from sqlalchemy.orm import Session
from typing import Optional
from menu_planner.models.ai_preferences import AIPreferences
from menu_planner.repositories.repository import BaseRepository


class AIPreferencesRepository(BaseRepository[AIPreferences]):
    """Repository for saved menu generation preferences."""

    def __init__(self, db: Session):
        super().__init__(AIPreferences, db)

    def get_by_household(self, household_id: int) -> Optional[AIPreferences]:
        return (
            self.db.query(AIPreferences)
            .filter(AIPreferences.household_id == household_id)
            .first()
        )
