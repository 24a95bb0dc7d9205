from sqlalchemy.orm import Session
from pydantic import ValidationError
from typing import List, Optional
from collections import OrderedDict
from datetime import date
import json
import logging

from menu_planner.models.shopping_list import ShoppingList, ShoppingItem, ShoppingListTemplate
from menu_planner.repositories.shopping_list_repository import (
    ShoppingListRepository,
    ShoppingListTemplateRepository,
)
from menu_planner.repositories.household_repository import HouseholdRepository
from menu_planner.repositories.menu_plan_repository import MenuPlanRepository
from menu_planner.repositories.recipe_repository import RecipeRepository
from menu_planner.schemas.shopping_list import ShoppingItemCreate, ShoppingItemUpdate, TemplateItem
from menu_planner.services.ingredient_aggregator import aggregate
from menu_planner.utils.dates import week_window
from menu_planner.core.exception import (
    ResourceNotFoundException,
    AuthorizationException,
    ValidationException,
    NoMealsScheduledException,
    MissingRecipesException,
    NoIngredientsException,
)

logger = logging.getLogger(__name__)


def parse_template_items(raw: Optional[str], template_id: Optional[int] = None) -> List[TemplateItem]:
    """
    Parse stored template items.

    A corrupt payload yields an empty list so that one bad template never
    breaks template listing.
    """
    try:
        data = json.loads(raw or "[]")
    except (json.JSONDecodeError, TypeError):
        logger.warning("Template %s has unparseable items; treating as empty", template_id)
        return []

    if not isinstance(data, list):
        logger.warning("Template %s items are not a list; treating as empty", template_id)
        return []

    items: List[TemplateItem] = []
    for entry in data:
        try:
            item = TemplateItem.model_validate(entry)
        except ValidationError:
            logger.warning("Template %s has a malformed item; skipping it", template_id)
            continue
        item.checked = False
        items.append(item)
    return items


class ShoppingListService:
    """Service layer for shopping list generation, editing and templates."""

    def __init__(self, db: Session):
        self.db = db
        self.list_repo = ShoppingListRepository(db)
        self.template_repo = ShoppingListTemplateRepository(db)
        self.household_repo = HouseholdRepository(db)
        self.menu_plan_repo = MenuPlanRepository(db)
        self.recipe_repo = RecipeRepository(db)

    # ===== Generation =====

    def generate_from_week(self, household_id: int, week_start: date, user_id: int) -> ShoppingList:
        """
        Build a shopping list from every meal scheduled in a seven day window.

        Recipe ingredients are aggregated across all occurrences; sides are
        counted per side ("2 Rice"). Nothing is written unless every scheduled
        meal resolves to a recipe and at least one line results.

        Args:
            household_id: Household whose calendar is read
            week_start: First day of the window
            user_id: Requesting user

        Returns:
            The persisted shopping list with its items

        Raises:
            AuthorizationException: If user not member
            NoMealsScheduledException: If the window holds no scheduled meals
            MissingRecipesException: If any scheduled menu item lacks a recipe
            NoIngredientsException: If no ingredient or side lines result
        """
        self._check_member(household_id, user_id)

        start, end = week_window(week_start)
        plans = self.menu_plan_repo.get_by_date_range(household_id, start, end)
        if not plans:
            raise NoMealsScheduledException(start.isoformat(), end.isoformat())

        menu_item_ids = list(OrderedDict.fromkeys(plan.menu_item_id for plan in plans))
        recipes = self.recipe_repo.get_by_menu_items(menu_item_ids)

        missing = [plan for plan in plans if plan.menu_item_id not in recipes]
        if missing:
            missing_ids = list(OrderedDict.fromkeys(plan.menu_item_id for plan in missing))
            names = list(OrderedDict.fromkeys(plan.menu_item_name for plan in missing))
            raise MissingRecipesException(missing_ids, names)

        raw_ingredients = []
        side_counts: "OrderedDict[int, list]" = OrderedDict()
        for plan in plans:
            raw_ingredients.extend(recipes[plan.menu_item_id].ingredients)
            if plan.side_id is not None and plan.side is not None:
                tally = side_counts.setdefault(plan.side_id, [plan.side.name, 0])
                tally[1] += 1

        ingredient_lines = aggregate(raw_ingredients)
        side_lines = [f"{count} {name}" for name, count in side_counts.values()]

        if not ingredient_lines and not side_lines:
            raise NoIngredientsException()

        shopping_list = ShoppingList(
            household_id=household_id,
            date_range_start=start,
            date_range_end=end,
            created_by_id=user_id,
        )
        sort_order = 0
        for line in ingredient_lines:
            shopping_list.items.append(
                ShoppingItem(
                    ingredient_name=line.name,
                    quantity=line.quantity,
                    unit=line.unit,
                    checked=False,
                    added_manually=False,
                    sort_order=sort_order,
                )
            )
            sort_order += 1
        for side_line in side_lines:
            shopping_list.items.append(
                ShoppingItem(
                    ingredient_name=side_line,
                    quantity=0,
                    unit="",
                    checked=False,
                    added_manually=False,
                    sort_order=sort_order,
                )
            )
            sort_order += 1

        self.db.add(shopping_list)
        self.db.commit()
        self.db.refresh(shopping_list)

        logger.info(
            "Generated shopping list %s for household %s (%s to %s): %s ingredient lines, %s side lines",
            shopping_list.id, household_id, start, end, len(ingredient_lines), len(side_lines),
        )
        return shopping_list

    def create_empty_list(self, household_id: int, user_id: int, start: date, end: date) -> ShoppingList:
        """Create a list with no items for manual entry."""
        self._check_member(household_id, user_id)
        if end < start:
            raise ValidationException("End date must not be before start date", field="date_range_end")

        shopping_list = ShoppingList(
            household_id=household_id,
            date_range_start=start,
            date_range_end=end,
            created_by_id=user_id,
        )
        return self.list_repo.create(shopping_list)

    # ===== Lists =====

    def get_list(self, list_id: int, user_id: int) -> ShoppingList:
        return self._get_list_for_member(list_id, user_id)

    def get_household_lists(self, household_id: int, user_id: int, skip: int = 0, limit: int = 100) -> List[ShoppingList]:
        self._check_member(household_id, user_id)
        return self.list_repo.get_by_household(household_id, skip, limit)

    def delete_list(self, list_id: int, user_id: int) -> dict:
        self._get_list_for_member(list_id, user_id)
        self.list_repo.delete(list_id)
        return {"message": "Shopping list deleted successfully"}

    def export_list(self, list_id: int, user_id: int) -> str:
        """
        Render a list as plain text: items still to buy, then purchased ones.
        """
        shopping_list = self._get_list_for_member(list_id, user_id)
        items = self.list_repo.get_items(list_id)

        lines = [
            f"Shopping List ({shopping_list.date_range_start.isoformat()} - "
            f"{shopping_list.date_range_end.isoformat()})",
            "",
        ]

        to_buy = [item for item in items if not item.checked]
        purchased = [item for item in items if item.checked]

        lines.append("To Buy:")
        lines.extend(self._format_export_line(item, "[ ]") for item in to_buy)
        if not to_buy:
            lines.append("  (nothing)")

        if purchased:
            lines.append("")
            lines.append("Purchased:")
            lines.extend(self._format_export_line(item, "[x]") for item in purchased)

        return "\n".join(lines)

    # ===== Items =====

    def add_manual_item(self, list_id: int, user_id: int, data: ShoppingItemCreate) -> ShoppingItem:
        """
        Append an item typed in by a member, after every existing item.

        Raises:
            ValidationException: If the name is empty
        """
        self._get_list_for_member(list_id, user_id)

        name = data.ingredient_name.strip()
        if not name:
            raise ValidationException("Item name is required", field="ingredient_name")

        item = ShoppingItem(
            shopping_list_id=list_id,
            ingredient_name=name,
            quantity=data.quantity,
            unit=data.unit.strip(),
            checked=False,
            added_manually=True,
            sort_order=self._next_sort_order(list_id),
        )
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        return item

    def update_item(self, item_id: int, user_id: int, data: ShoppingItemUpdate) -> ShoppingItem:
        item = self._get_item_for_member(item_id, user_id)

        update_data = data.model_dump(exclude_unset=True)
        if "ingredient_name" in update_data:
            name = (update_data["ingredient_name"] or "").strip()
            if not name:
                raise ValidationException("Item name is required", field="ingredient_name")
            update_data["ingredient_name"] = name
        if update_data.get("unit") is not None:
            update_data["unit"] = update_data["unit"].strip()
        update_data = {key: value for key, value in update_data.items() if value is not None}

        for key, value in update_data.items():
            setattr(item, key, value)

        self.db.commit()
        self.db.refresh(item)
        return item

    def toggle_item(self, item_id: int, user_id: int) -> ShoppingItem:
        """Flip the checked state of an item."""
        item = self._get_item_for_member(item_id, user_id)
        item.checked = not item.checked
        self.db.commit()
        self.db.refresh(item)
        return item

    def remove_item(self, item_id: int, user_id: int) -> dict:
        item = self._get_item_for_member(item_id, user_id)
        self.db.delete(item)
        self.db.commit()
        return {"message": "Item removed from shopping list"}

    def reorder_items(self, list_id: int, user_id: int, dragged_item_id: int, target_item_id: int) -> List[ShoppingItem]:
        """
        Move an unchecked item onto the position of another unchecked item.

        The sort_order values already held by the unchecked items are handed
        out again in the new order, so checked items keep theirs untouched.

        Returns:
            All items of the list in display order

        Raises:
            ValidationException: If either item is checked or not in this list
        """
        self._get_list_for_member(list_id, user_id)
        items = self.list_repo.get_items(list_id)
        unchecked = [item for item in items if not item.checked]
        by_id = {item.id: item for item in items}

        for item_id in (dragged_item_id, target_item_id):
            if item_id not in by_id:
                raise ValidationException(f"Item {item_id} is not in this shopping list")
            if by_id[item_id].checked:
                raise ValidationException("Checked items cannot be reordered")

        if dragged_item_id == target_item_id:
            return items

        slots = [item.sort_order for item in unchecked]
        dragged = by_id[dragged_item_id]
        reordered = [item for item in unchecked if item.id != dragged_item_id]
        target_index = next(i for i, item in enumerate(unchecked) if item.id == target_item_id)
        reordered.insert(target_index, dragged)

        for item, sort_order in zip(reordered, slots):
            item.sort_order = sort_order

        self.db.commit()
        return self.list_repo.get_items(list_id)

    # ===== Templates =====

    def save_as_template(self, list_id: int, user_id: int, name: str) -> dict:
        """
        Snapshot the items of a list under a name. Stored items are always unchecked.

        Raises:
            ValidationException: If the name is empty
        """
        shopping_list = self._get_list_for_member(list_id, user_id)

        template_name = (name or "").strip()
        if not template_name:
            raise ValidationException("Template name is required", field="name")

        snapshot = [
            TemplateItem(
                ingredient_name=item.ingredient_name,
                quantity=item.quantity,
                unit=item.unit,
                added_manually=item.added_manually,
                checked=False,
            )
            for item in self.list_repo.get_items(list_id)
        ]

        template = ShoppingListTemplate(
            household_id=shopping_list.household_id,
            name=template_name,
            items=json.dumps([item.model_dump() for item in snapshot]),
            created_by_id=user_id,
        )
        template = self.template_repo.create(template)
        return self._template_to_dict(template, snapshot)

    def list_templates(self, household_id: int, user_id: int) -> List[dict]:
        self._check_member(household_id, user_id)
        return [
            self._template_to_dict(template, parse_template_items(template.items, template.id))
            for template in self.template_repo.get_by_household(household_id)
        ]

    def load_template(self, template_id: int, target_list_id: int, user_id: int) -> ShoppingList:
        """
        Append a template's items to an existing list. Items already on the
        list are not merged, so loading twice doubles the lines.

        Raises:
            ValidationException: If the template holds no items or belongs to another household
        """
        template = self._get_template_for_member(template_id, user_id)
        shopping_list = self._get_list_for_member(target_list_id, user_id)
        if shopping_list.household_id != template.household_id:
            raise ValidationException("Template and shopping list belong to different households")

        items = parse_template_items(template.items, template.id)
        if not items:
            raise ValidationException("Template is empty")

        self._append_template_items(shopping_list, items)
        self.db.commit()
        self.db.refresh(shopping_list)
        return shopping_list

    def create_list_from_template(self, template_id: int, user_id: int, start: date, end: date) -> ShoppingList:
        """Create a new list for a date range and fill it from a template."""
        template = self._get_template_for_member(template_id, user_id)
        items = parse_template_items(template.items, template.id)
        if not items:
            raise ValidationException("Template is empty")
        if end < start:
            raise ValidationException("End date must not be before start date", field="date_range_end")

        shopping_list = ShoppingList(
            household_id=template.household_id,
            date_range_start=start,
            date_range_end=end,
            created_by_id=user_id,
        )
        self.db.add(shopping_list)
        self.db.flush()
        self._append_template_items(shopping_list, items)
        self.db.commit()
        self.db.refresh(shopping_list)
        return shopping_list

    def delete_template(self, template_id: int, user_id: int) -> dict:
        self._get_template_for_member(template_id, user_id)
        self.template_repo.delete(template_id)
        return {"message": "Template deleted successfully"}

    # ===== Helpers =====

    def _append_template_items(self, shopping_list: ShoppingList, items: List[TemplateItem]) -> None:
        start = self._next_sort_order(shopping_list.id) if shopping_list.id else 0
        for offset, item in enumerate(items):
            self.db.add(
                ShoppingItem(
                    shopping_list_id=shopping_list.id,
                    ingredient_name=item.ingredient_name,
                    quantity=item.quantity,
                    unit=item.unit,
                    checked=False,
                    added_manually=item.added_manually,
                    sort_order=start + offset,
                )
            )

    def _next_sort_order(self, list_id: int) -> int:
        current_max = self.list_repo.get_max_sort_order(list_id)
        return 0 if current_max is None else current_max + 1

    @staticmethod
    def _format_export_line(item: ShoppingItem, box: str) -> str:
        quantity = item.display_quantity
        return f"  {box} {item.ingredient_name} ({quantity})" if quantity else f"  {box} {item.ingredient_name}"

    @staticmethod
    def _template_to_dict(template: ShoppingListTemplate, items: List[TemplateItem]) -> dict:
        return {
            "id": template.id,
            "uuid": template.uuid,
            "household_id": template.household_id,
            "name": template.name,
            "items": items,
            "created_at": template.created_at,
        }

    def _check_member(self, household_id: int, user_id: int) -> None:
        if not self.household_repo.is_member(household_id, user_id):
            raise AuthorizationException("You must be a member of the household")

    def _get_list_for_member(self, list_id: int, user_id: int) -> ShoppingList:
        shopping_list = self.list_repo.get(list_id)
        if not shopping_list:
            raise ResourceNotFoundException("Shopping list", list_id)
        self._check_member(shopping_list.household_id, user_id)
        return shopping_list

    def _get_item_for_member(self, item_id: int, user_id: int) -> ShoppingItem:
        item = self.list_repo.get_item(item_id)
        if not item:
            raise ResourceNotFoundException("Shopping item", item_id)
        self._get_list_for_member(item.shopping_list_id, user_id)
        return item

    def _get_template_for_member(self, template_id: int, user_id: int) -> ShoppingListTemplate:
        template = self.template_repo.get(template_id)
        if not template:
            raise ResourceNotFoundException("Template", template_id)
        self._check_member(template.household_id, user_id)
        return template
