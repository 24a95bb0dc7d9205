import pytest
from datetime import date

from menu_planner.utils.dates import add_days, week_window, parse_iso_date
from menu_planner.core.exception import ValidationException


@pytest.mark.unit
class TestAddDays:
    """Calendar arithmetic used for week windows"""

    def test_within_month(self):
        assert add_days(date(2024, 3, 4), 6) == date(2024, 3, 10)

    def test_crosses_month_boundary(self):
        assert add_days(date(2024, 1, 29), 6) == date(2024, 2, 4)

    def test_crosses_leap_day(self):
        assert add_days(date(2024, 2, 26), 6) == date(2024, 3, 3)

    def test_non_leap_february(self):
        assert add_days(date(2023, 2, 26), 6) == date(2023, 3, 4)

    def test_crosses_year_boundary(self):
        assert add_days(date(2024, 12, 28), 6) == date(2025, 1, 3)

    def test_negative_offset_crosses_month_and_year(self):
        assert add_days(date(2024, 1, 5), -14) == date(2023, 12, 22)
        assert add_days(date(2024, 3, 1), -1) == date(2024, 2, 29)

    def test_zero_offset(self):
        assert add_days(date(2024, 5, 17), 0) == date(2024, 5, 17)

    def test_large_offset(self):
        assert add_days(date(2024, 1, 1), 366) == date(2025, 1, 1)


@pytest.mark.unit
class TestCalendarHelpers:

    def test_week_window_is_inclusive_seven_days(self):
        start, end = week_window(date(2024, 1, 29))
        assert start == date(2024, 1, 29)
        assert end == date(2024, 2, 4)

    def test_week_window_across_leap_day_and_new_year(self):
        assert week_window(date(2024, 2, 26))[1] == date(2024, 3, 3)
        assert week_window(date(2024, 12, 30))[1] == date(2025, 1, 5)


@pytest.mark.unit
class TestParseIsoDate:

    def test_valid_date(self):
        assert parse_iso_date("2024-02-29") == date(2024, 2, 29)

    @pytest.mark.parametrize("value", ["2023-02-29", "2024-13-01", "tomorrow", "", "2024-01"])
    def test_invalid_dates_raise(self, value):
        with pytest.raises(ValidationException):
            parse_iso_date(value)
