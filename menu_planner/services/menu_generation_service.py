from sqlalchemy.orm import Session
from typing import Dict, List, Optional, Tuple
from datetime import date
import json
import logging

from menu_planner.config import settings
from menu_planner.models.menu_plan import MenuPlan, MealType
from menu_planner.repositories.menu_item_repository import MenuItemRepository
from menu_planner.repositories.menu_plan_repository import MenuPlanRepository
from menu_planner.repositories.household_repository import HouseholdRepository
from menu_planner.repositories.ai_preferences_repository import AIPreferencesRepository
from menu_planner.schemas.ai import CatalogEntry, MealSelection, ProposedMeal
from menu_planner.services.menu_generator import MenuGenerator, GeminiMenuGenerator
from menu_planner.services.popularity_service import PopularityService
from menu_planner.utils.dates import add_days, parse_iso_date
from menu_planner.core.exception import (
    AuthorizationException,
    ValidationException,
    CustomException,
    OverwriteConfirmationRequiredException,
    GenerationUnavailableException,
    NoValidPlansException,
)

logger = logging.getLogger(__name__)

Slot = Tuple[date, MealType]


class MenuGenerationService:
    """
    Wraps a MenuGenerator with the catalog, recent-repeat exclusions,
    overwrite confirmation and validation of what it proposes.

    Either every valid proposal is scheduled or nothing changes.
    """

    def __init__(self, db: Session, generator: Optional[MenuGenerator] = None):
        self.db = db
        self.generator = generator or GeminiMenuGenerator()
        self.menu_item_repo = MenuItemRepository(db)
        self.menu_plan_repo = MenuPlanRepository(db)
        self.household_repo = HouseholdRepository(db)
        self.preferences_repo = AIPreferencesRepository(db)

    def build_catalog(self, household_id: int) -> List[CatalogEntry]:
        """Every visible menu item with its current popularity."""
        return [
            CatalogEntry(
                id=item.id,
                name=item.name,
                genre=item.genre.value,
                popularity_score=item.popularity_score,
            )
            for item in self.menu_item_repo.get_by_household(household_id)
        ]

    def exclusion_names(self, household_id: int, earliest_date: date) -> List[str]:
        """Names of items scheduled in the days leading up to ``earliest_date``."""
        window_start = add_days(earliest_date, -settings.MENU_EXCLUSION_DAYS)
        window_end = add_days(earliest_date, -1)
        return self.menu_plan_repo.get_menu_item_names_in_range(household_id, window_start, window_end)

    def get_generation_context(self, household_id: int, user_id: int, earliest_date: date) -> dict:
        """What the generator would be given for slots starting at ``earliest_date``."""
        if not self.household_repo.is_member(household_id, user_id):
            raise AuthorizationException("You must be a member of the household")
        return {
            "household_id": household_id,
            "catalog": self.build_catalog(household_id),
            "exclusions": self.exclusion_names(household_id, earliest_date),
        }

    def generate_menu(
        self,
        household_id: int,
        user_id: int,
        selections: List[MealSelection],
        dietary_instructions: Optional[str] = None,
        genre_weights: Optional[Dict[str, float]] = None,
        overwrite: bool = False,
    ) -> dict:
        """
        Fill the selected slots with generated meals.

        Args:
            household_id: Household whose calendar is filled
            user_id: Requesting user
            selections: Slots to fill; duplicates collapse
            dietary_instructions: Free text, defaults to saved preferences
            genre_weights: Genre to weight map, defaults to saved preferences
            overwrite: Replace meals already scheduled in the selected slots

        Returns:
            Dict with the created plans, replaced and dropped counts and the exclusions used

        Raises:
            AuthorizationException: If user not member
            ValidationException: If no slots are selected or the catalog is empty
            OverwriteConfirmationRequiredException: If slots are occupied and overwrite is false
            GenerationUnavailableException: If the generator fails
            NoValidPlansException: If no proposal survives validation
        """
        if not self.household_repo.is_member(household_id, user_id):
            raise AuthorizationException("You must be a member of the household")

        requested = self._unique_selections(selections)
        if not requested:
            raise ValidationException("Select at least one meal to generate", field="selections")

        occupied = []
        for selection in requested:
            plan = self.menu_plan_repo.get_by_slot(household_id, selection.date, selection.meal_type)
            if plan is not None:
                occupied.append(plan)

        if occupied and not overwrite:
            raise OverwriteConfirmationRequiredException(
                [
                    {
                        "plan_id": plan.id,
                        "date": plan.date.isoformat(),
                        "meal_type": plan.meal_type.value,
                        "menu_item_name": plan.menu_item_name,
                    }
                    for plan in occupied
                ],
                len(requested),
            )

        catalog = self.build_catalog(household_id)
        if not catalog:
            raise ValidationException("No menu items available. Add some menu items first.")

        dietary_text, weights = self._resolve_preferences(household_id, dietary_instructions, genre_weights)
        exclusions = self.exclusion_names(household_id, min(selection.date for selection in requested))

        replaced_item_ids = sorted({plan.menu_item_id for plan in occupied})

        try:
            for plan in occupied:
                self.db.delete(plan)
            self.db.flush()

            try:
                proposals = self.generator.generate(catalog, exclusions, requested, dietary_text, weights)
            except CustomException:
                raise
            except Exception as e:
                logger.error("Menu generator failed for household %s: %s", household_id, e)
                raise GenerationUnavailableException(f"Failed to generate menu: {e}")

            valid = self._validate_proposals(proposals, catalog, requested)
            if not valid:
                raise NoValidPlansException()

            created = []
            for (meal_date, meal_type), menu_item_id in valid.items():
                plan = MenuPlan(
                    household_id=household_id,
                    date=meal_date,
                    meal_type=meal_type,
                    menu_item_id=menu_item_id,
                    created_by_id=user_id,
                )
                self.db.add(plan)
                created.append(plan)

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        for plan in created:
            self.db.refresh(plan)

        # Votes on replaced meals are gone, so their items need new scores
        popularity = PopularityService(self.db)
        for menu_item_id in replaced_item_ids:
            if self.menu_item_repo.exists(menu_item_id):
                popularity.recompute_popularity(menu_item_id)

        logger.info(
            "Generated %s meals for household %s (%s replaced, %s proposals dropped)",
            len(created), household_id, len(occupied), len(proposals) - len(created),
        )
        return {
            "household_id": household_id,
            "created": created,
            "replaced_count": len(occupied),
            "dropped_count": len(proposals) - len(created),
            "exclusions": exclusions,
        }

    def _validate_proposals(
        self,
        proposals: List[ProposedMeal],
        catalog: List[CatalogEntry],
        requested: List[MealSelection],
    ) -> Dict[Slot, int]:
        """
        Keep proposals with a real date, a known meal type, an exact catalog
        name and a requested slot. The first proposal for a slot wins.
        """
        ids_by_name = {}
        for entry in catalog:
            ids_by_name.setdefault(entry.name, entry.id)
        requested_slots = {(selection.date, selection.meal_type) for selection in requested}

        valid: Dict[Slot, int] = {}
        for proposal in proposals:
            try:
                meal_date = parse_iso_date(proposal.date)
            except ValidationException:
                logger.debug("Dropping proposal with bad date: %s", proposal)
                continue

            try:
                meal_type = MealType(proposal.meal_type.strip().lower())
            except ValueError:
                logger.debug("Dropping proposal with unknown meal type: %s", proposal)
                continue

            menu_item_id = ids_by_name.get(proposal.menu_item_name)
            if menu_item_id is None:
                logger.debug("Dropping proposal for unknown menu item: %s", proposal)
                continue

            slot = (meal_date, meal_type)
            if slot not in requested_slots:
                logger.debug("Dropping proposal for unrequested slot: %s", proposal)
                continue
            if slot in valid:
                logger.debug("Dropping duplicate proposal for slot: %s", proposal)
                continue

            valid[slot] = menu_item_id

        return valid

    def _resolve_preferences(
        self,
        household_id: int,
        dietary_instructions: Optional[str],
        genre_weights: Optional[Dict[str, float]],
    ) -> Tuple[str, Dict[str, float]]:
        if dietary_instructions is not None and genre_weights is not None:
            return dietary_instructions, genre_weights

        saved = self.preferences_repo.get_by_household(household_id)
        saved_text = saved.dietary_instructions if saved else ""
        saved_weights: Dict[str, float] = {}
        if saved:
            try:
                parsed = json.loads(saved.genre_weights or "{}")
                if isinstance(parsed, dict):
                    saved_weights = parsed
            except json.JSONDecodeError:
                logger.warning("Household %s has unparseable genre weights", household_id)

        return (
            dietary_instructions if dietary_instructions is not None else saved_text,
            genre_weights if genre_weights is not None else saved_weights,
        )

    @staticmethod
    def _unique_selections(selections: List[MealSelection]) -> List[MealSelection]:
        seen = set()
        unique = []
        for selection in selections:
            slot = (selection.date, selection.meal_type)
            if slot not in seen:
                seen.add(slot)
                unique.append(selection)
        return unique
