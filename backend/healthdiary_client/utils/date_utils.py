"""
Health Diary Client — Date Utilities
=====================================

What:  One place for turning dates into the "YYYY-MM-DD" form the API and
       every component compare on, plus display formatting.
Why:   Entries arrive as "2025-03-01", "2025-03-01T00:00:00.000Z" or date
       objects; comparing them as strings only works once they are normalized.

Months are 1-12 throughout this module.
"""

import calendar
import logging
import re
from collections import namedtuple
from datetime import date, datetime, timedelta
from typing import Any, Optional

logger = logging.getLogger(__name__)

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Tried in order when a string is not already YYYY-MM-DD
_PARSE_FORMATS = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%d.%m.%Y",
    "%m/%d/%Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%A, %B %d, %Y",
)

MonthRange = namedtuple("MonthRange", ["first_day", "last_day", "days_in_month"])


def _parse(text: str) -> Optional[date]:
    for fmt in _PARSE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def to_iso_date(value: Any) -> str:
    """
    Normalize a date-like value to "YYYY-MM-DD".

    Accepts date/datetime objects and strings; anything after a "T" is
    dropped. Returns "" for empty or unparseable input.

    Example:
        >>> to_iso_date("2025-03-01T10:00:00Z")
        '2025-03-01'
    """
    if value is None or value == "":
        return ""

    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()

    if isinstance(value, str):
        text = value.strip().split("T")[0]
        if ISO_DATE_PATTERN.match(text):
            return text
        parsed = _parse(text)
        if parsed is not None:
            return parsed.isoformat()

    logger.error("Invalid date: %r", value)
    return ""


def to_date(value: Any) -> Optional[date]:
    iso = to_iso_date(value)
    return date.fromisoformat(iso) if iso else None


def format_display_date(value: Any) -> str:
    """"2025-03-01" → "Saturday, March 1, 2025"."""
    d = to_date(value)
    if d is None:
        return ""
    return f"{d:%A}, {d:%B} {d.day}, {d.year}"


def format_full_date(value: Any) -> str:
    """"2025-03-01" → "March 1, 2025"."""
    d = to_date(value)
    if d is None:
        return ""
    return f"{d:%B} {d.day}, {d.year}"


def month_label(year: int, month: int) -> str:
    return f"{calendar.month_name[month]} {year}"


def today() -> str:
    return date.today().isoformat()


def is_same_day(first: Any, second: Any) -> bool:
    return to_iso_date(first) == to_iso_date(second)


def get_month_range(year: int, month: int) -> MonthRange:
    days_in_month = calendar.monthrange(year, month)[1]
    return MonthRange(
        first_day=date(year, month, 1).isoformat(),
        last_day=date(year, month, days_in_month).isoformat(),
        days_in_month=days_in_month,
    )


def get_week_number(value: Any) -> int:
    """ISO 8601 week number (weeks start on Monday)."""
    d = to_date(value)
    if d is None:
        raise ValueError(f"Invalid date: {value!r}")
    return d.isocalendar()[1]


def shift_month(year: int, month: int, delta: int):
    """Move `delta` months from (year, month); returns the new (year, month)."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def create_date(year: int, month: int, day: int) -> str:
    """
    Build an ISO date, rolling out-of-range months and days over into the
    neighbouring ones: create_date(2025, 13, 1) is "2026-01-01" and
    create_date(2025, 3, 0) is "2025-02-28".
    """
    year, month = shift_month(year, 1, month - 1)
    return (date(year, month, 1) + timedelta(days=day - 1)).isoformat()
