"""
Calendar arithmetic on plain ``date`` values.

Windows are computed with ``date + timedelta``, never through datetimes or
string round trips, so no timezone can shift a day.
"""
from datetime import date, timedelta
from typing import Tuple

from menu_planner.core.exception import ValidationException


def add_days(day: date, offset: int) -> date:
    """Return ``day`` shifted by ``offset`` days (negative offsets go back)."""
    return day + timedelta(days=offset)


def week_window(week_start: date) -> Tuple[date, date]:
    """Inclusive seven day window starting at ``week_start``."""
    return week_start, week_start + timedelta(days=6)


def parse_iso_date(value: str, field: str = "date") -> date:
    """
    Parse a ``YYYY-MM-DD`` string.

    Raises:
        ValidationException: If the value is not a valid calendar date
    """
    try:
        year, month, dom = (int(part) for part in str(value).strip().split("-"))
        return date(year, month, dom)
    except (ValueError, TypeError):
        raise ValidationException(f"'{value}' is not a valid YYYY-MM-DD date", field=field)
