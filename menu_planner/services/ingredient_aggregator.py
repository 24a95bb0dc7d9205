"""
Consolidation of ingredient lines into shopping list lines.

Lines merge when their names match case-insensitively and their units match
after trimming and lowercasing. Different units never merge, so "2 cup flour"
and "1 tbsp flour" stay two lines.
"""
from typing import Any, Dict, Iterable, List, Optional
from pydantic import BaseModel

KEY_SEPARATOR = "\x1f"


class AggregatedIngredient(BaseModel):
    name: str
    quantity: float
    unit: str


def _field(item: Any, key: str) -> Any:
    if isinstance(item, dict):
        return item.get(key)
    return getattr(item, key, None)


def _to_quantity(value: Any) -> float:
    if value is None or value == "":
        return 0.0
    return float(value)


def aggregate(items: Iterable[Any]) -> List[AggregatedIngredient]:
    """
    Merge ``{name, quantity, unit}`` lines.

    Accepts dicts or objects with ``name``, ``quantity`` and ``unit`` attributes.
    Empty names are skipped, a missing quantity counts as 0. The first seen
    spelling of a name is kept and lines come out in first-seen order.
    """
    merged: Dict[str, AggregatedIngredient] = {}

    for item in items:
        name = (_field(item, "name") or "").strip()
        if not name:
            continue

        unit = (_field(item, "unit") or "").strip().lower()
        quantity = _to_quantity(_field(item, "quantity"))

        key = name.lower() + KEY_SEPARATOR + unit
        existing: Optional[AggregatedIngredient] = merged.get(key)
        if existing is None:
            merged[key] = AggregatedIngredient(name=name, quantity=quantity, unit=unit)
        else:
            existing.quantity += quantity

    return list(merged.values())
