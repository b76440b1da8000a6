"""
Health Diary Client — Date Utility Tests
=========================================

What we test:
    ✅ to_iso_date normalizes strings, datetimes and dates; idempotent
    ✅ Invalid input gives "" instead of raising
    ✅ is_same_day ignores the time of day
    ✅ Month ranges, ISO week numbers and month/day overflow
    ✅ Display formats
"""

from datetime import date, datetime, timezone

import pytest

from healthdiary_client.utils import date_utils


class TestToIsoDate:

    @pytest.mark.parametrize("value, expected", [
        ("2025-03-01", "2025-03-01"),
        ("2025-03-01T23:30:00.000Z", "2025-03-01"),
        ("  2025-03-01  ", "2025-03-01"),
        ("03/01/2025", "2025-03-01"),
        ("01.03.2025", "2025-03-01"),
        ("March 1, 2025", "2025-03-01"),
        (date(2025, 3, 1), "2025-03-01"),
        (datetime(2025, 3, 1, 18, 45, tzinfo=timezone.utc), "2025-03-01"),
    ])
    def test_normalizes(self, value, expected):
        assert date_utils.to_iso_date(value) == expected

    @pytest.mark.parametrize("value", [None, "", "not a date", "2025-13-45x", 12345])
    def test_invalid_input_gives_empty_string(self, value):
        assert date_utils.to_iso_date(value) == ""

    def test_idempotent(self):
        once = date_utils.to_iso_date("2025-03-01T10:00:00Z")
        assert date_utils.to_iso_date(once) == once

    def test_to_date(self):
        assert date_utils.to_date("2025-03-01T10:00:00Z") == date(2025, 3, 1)
        assert date_utils.to_date("garbage") is None


class TestIsSameDay:

    def test_time_of_day_is_ignored(self):
        assert date_utils.is_same_day("2025-03-01T00:01:00Z", "2025-03-01T23:59:00Z")
        assert date_utils.is_same_day(date(2025, 3, 1), "2025-03-01")

    def test_reflexive_and_symmetric(self):
        a, b = "2025-03-01", "2025-03-02"
        assert date_utils.is_same_day(a, a)
        assert date_utils.is_same_day(a, b) == date_utils.is_same_day(b, a) is False


class TestMonthHelpers:

    def test_month_range_leap_february(self):
        month_range = date_utils.get_month_range(2024, 2)
        assert month_range.first_day == "2024-02-01"
        assert month_range.last_day == "2024-02-29"
        assert month_range.days_in_month == 29

    def test_month_range_december(self):
        assert date_utils.get_month_range(2025, 12).last_day == "2025-12-31"

    @pytest.mark.parametrize("value, week", [
        ("2025-01-01", 1),
        ("2024-12-30", 1),
        ("2025-03-01", 9),
    ])
    def test_iso_week_number(self, value, week):
        assert date_utils.get_week_number(value) == week

    def test_week_number_of_invalid_date_raises(self):
        with pytest.raises(ValueError):
            date_utils.get_week_number("nope")

    @pytest.mark.parametrize("args, expected", [
        ((2025, 1, -1), (2024, 12)),
        ((2025, 12, 1), (2026, 1)),
        ((2025, 3, 0), (2025, 3)),
        ((2025, 3, -15), (2023, 12)),
    ])
    def test_shift_month(self, args, expected):
        assert date_utils.shift_month(*args) == expected

    @pytest.mark.parametrize("args, expected", [
        ((2025, 3, 15), "2025-03-15"),
        ((2025, 13, 1), "2026-01-01"),
        ((2025, 3, 0), "2025-02-28"),
        ((2025, 1, 32), "2025-02-01"),
    ])
    def test_create_date_rolls_over(self, args, expected):
        assert date_utils.create_date(*args) == expected


class TestFormatting:

    def test_display_date(self):
        assert date_utils.format_display_date("2025-03-01") == "Saturday, March 1, 2025"

    def test_full_date(self):
        assert date_utils.format_full_date("2025-03-01T08:00:00Z") == "March 1, 2025"

    def test_month_label(self):
        assert date_utils.month_label(2025, 3) == "March 2025"

    def test_invalid_dates_format_to_empty(self):
        assert date_utils.format_display_date("") == ""
        assert date_utils.format_full_date(None) == ""
