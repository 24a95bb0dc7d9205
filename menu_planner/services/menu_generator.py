from typing import Any, Dict, List, Optional, Protocol
import json
import logging
import re

from google import genai
from google.genai import types

from menu_planner.config import settings
from menu_planner.schemas.ai import CatalogEntry, MealSelection, ProposedMeal
from menu_planner.core.exception import GenerationUnavailableException

logger = logging.getLogger(__name__)


class MenuGenerator(Protocol):
    """Anything that can propose (date, meal type, item name) triples for a set of slots."""

    def generate(
        self,
        catalog: List[CatalogEntry],
        exclusions: List[str],
        selections: List[MealSelection],
        dietary_text: str,
        genre_weights: Dict[str, float],
    ) -> List[ProposedMeal]:
        ...


class GeminiMenuGenerator:
    """Menu generator backed by Google Gemini."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        self.api_key = api_key if api_key is not None else settings.GEMINI_API_KEY
        self.model = model or settings.GEMINI_MENU_MODEL
        self._client = None

    @property
    def client(self):
        if self._client is None:
            if not self.api_key or self.api_key == "your_api_key_here":
                raise GenerationUnavailableException(
                    "AI service is not configured. Please contact administrator."
                )
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def generate(
        self,
        catalog: List[CatalogEntry],
        exclusions: List[str],
        selections: List[MealSelection],
        dietary_text: str,
        genre_weights: Dict[str, float],
    ) -> List[ProposedMeal]:
        """
        Ask Gemini to fill the selected slots from the catalog.

        Entries missing a date, meal type or item name are discarded here;
        the caller validates the rest against its catalog.

        Raises:
            GenerationUnavailableException: If the API cannot be reached or
                its answer holds no JSON array
        """
        prompt = self.build_prompt(catalog, exclusions, selections, dietary_text, genre_weights)
        response_text = self._call_gemini(prompt)
        raw_plans = self._extract_plans_from_response(response_text)

        proposals: List[ProposedMeal] = []
        for entry in raw_plans:
            if not isinstance(entry, dict):
                continue
            meal_date = entry.get("date")
            meal_type = entry.get("mealType") or entry.get("meal_type")
            name = entry.get("menuItemName") or entry.get("menu_item_name")
            if not meal_date or not meal_type or not name:
                continue
            proposals.append(
                ProposedMeal(date=str(meal_date), meal_type=str(meal_type), menu_item_name=str(name))
            )

        logger.info("Gemini proposed %s meals for %s slots", len(proposals), len(selections))
        return proposals

    @staticmethod
    def build_prompt(
        catalog: List[CatalogEntry],
        exclusions: List[str],
        selections: List[MealSelection],
        dietary_text: str,
        genre_weights: Dict[str, float],
    ) -> str:
        voted = sorted(
            (item for item in catalog if item.popularity_score != 0),
            key=lambda item: item.popularity_score,
            reverse=True,
        )
        unvoted = [item for item in catalog if item.popularity_score == 0]

        menu_items_text = ""
        if voted:
            menu_items_text += "Menu Items with Member Votes (prefer these based on popularity):\n"
            menu_items_text += "\n".join(
                f"- {item.name} ({item.genre}) - Popularity: "
                f"{'+' if item.popularity_score > 0 else ''}{item.popularity_score}"
                for item in voted
            )
            menu_items_text += "\n\n"
        if unvoted:
            menu_items_text += "Menu Items (no votes yet, equal preference):\n"
            menu_items_text += "\n".join(f"- {item.name} ({item.genre})" for item in unvoted)

        genre_text = ", ".join(f"{genre}: {weight}" for genre, weight in genre_weights.items()) or "None"
        selections_text = ", ".join(
            f"{selection.date.strftime('%A')} {selection.meal_type.value} ({selection.date.isoformat()})"
            for selection in selections
        )
        exclusions_text = ", ".join(exclusions) if exclusions else "None"

        voting_text = ""
        if voted:
            voting_text = """
7. Use popularity scores to reflect household member preferences:
   - Items with positive scores are liked - prioritize these
   - Items with negative scores are disliked - avoid these when possible
   - Only use items with negative scores if no better alternatives exist"""

        return f"""You are a meal planning assistant. Generate menu suggestions based on the following criteria:

Available Menu Items:
{menu_items_text}

Genre Preferences (higher = more likely): {genre_text}

Dietary Instructions: {dietary_text or "None specified"}

Recently Served (avoid repeating these): {exclusions_text}

Meals to Generate:
{selections_text}

Requirements:
1. Select one menu item from the available list for each meal
2. Consider the genre preferences when selecting items
3. Follow dietary instructions if provided
4. Try to vary the menu items across the week (avoid too much repetition)
5. Avoid recently served items where possible
6. Consider meal type appropriateness (e.g., breakfast items for breakfast){voting_text}

Return a JSON array with this exact format:
[
  {{
    "date": "YYYY-MM-DD",
    "mealType": "breakfast|lunch|dinner",
    "menuItemName": "exact name from available menu items"
  }}
]

Only return the JSON array, no other text.
"""

    def _call_gemini(self, prompt: str) -> str:
        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    temperature=settings.GEMINI_TEMPERATURE,
                    max_output_tokens=settings.GEMINI_MAX_TOKENS,
                ),
            )
        except GenerationUnavailableException:
            raise
        except Exception as e:
            logger.error("Gemini API error: %s", e)
            error_str = str(e).lower()
            if "rate" in error_str or "limit" in error_str:
                raise GenerationUnavailableException(
                    "AI service is busy. Please try again in a few moments."
                )
            raise GenerationUnavailableException(f"Failed to generate menu: {e}")

        if not response or not response.text:
            raise GenerationUnavailableException("AI service returned empty response")

        return response.text

    @staticmethod
    def _extract_plans_from_response(response_text: str) -> List[Any]:
        """
        Extract the array of plans from a Gemini answer.

        Tries:
        1. Direct JSON parse (an array, or an object wrapping it in
           "menuPlans" or "plans")
        2. JSON array inside a markdown code fence
        3. First [...] match in the text
        """
        def unwrap(parsed: Any) -> Optional[List[Any]]:
            if isinstance(parsed, list):
                return parsed
            if isinstance(parsed, dict):
                for key in ("menuPlans", "plans"):
                    if isinstance(parsed.get(key), list):
                        return parsed[key]
            return None

        try:
            plans = unwrap(json.loads(response_text.strip()))
            if plans is not None:
                return plans
        except json.JSONDecodeError:
            pass

        match = re.search(r"```(?:json)?\s*(\[.*?\])\s*```", response_text, re.DOTALL)
        if match:
            try:
                return json.loads(match.group(1))
            except json.JSONDecodeError:
                pass

        match = re.search(r"\[.*\]", response_text, re.DOTALL)
        if match:
            try:
                plans = unwrap(json.loads(match.group(0)))
                if plans is not None:
                    return plans
            except json.JSONDecodeError:
                pass

        logger.warning("Could not find a JSON array in AI response")
        raise GenerationUnavailableException(
            "The AI service returned data in an unexpected format. Please try again."
        )
