# =============================================================================
# lib/dates.py - Event Date Formatting
# =============================================================================
# Builds the uppercase date strings shown on event cards and detail pages,
# e.g. "MAR 5 - MAR 7, 2025".
# =============================================================================

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping

DATE_TBD = "DATE TBD"

_MONTHS = (
    "JAN", "FEB", "MAR", "APR", "MAY", "JUN",
    "JUL", "AUG", "SEP", "OCT", "NOV", "DEC",
)

DateLike = str | date | datetime | None


def parse_date(value: DateLike) -> date | None:
    """
    Parse an ISO date or datetime into a calendar date.

    Accepts "2025-03-05", "2025-03-05T09:00:00", "2025-03-05T09:00:00Z" and
    date/datetime objects. Empty values return None.

    Raises:
        ValueError: If the string is not ISO formatted
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = value.strip()
    if not text:
        return None
    # fromisoformat() on older interpreters rejects the "Z" suffix
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text).date()


def _month_day(day: date) -> str:
    return f"{_MONTHS[day.month - 1]} {day.day}"


def format_date(day: date) -> str:
    """Format a single date as "MAR 5, 2025"."""
    return f"{_month_day(day)}, {day.year}"


def format_date_range(start: DateLike, end: DateLike = None) -> str:
    """
    Format a start/end pair into a display range.

    - No start: ""
    - No end, or same calendar day: "MAR 5, 2025"
    - Same year: "MAR 5 - MAR 7, 2025"
    - Different years: "DEC 30, 2024 - JAN 2, 2025"
    """
    start_day = parse_date(start)
    if start_day is None:
        return ""

    end_day = parse_date(end)
    if end_day is None or end_day == start_day:
        return format_date(start_day)

    if start_day.year == end_day.year:
        return f"{_month_day(start_day)} - {_month_day(end_day)}, {end_day.year}"

    return f"{format_date(start_day)} - {format_date(end_day)}"


def display_date_range(record: Mapping[str, Any]) -> str:
    """
    Pick the date string to show for an event row.

    Prefers the stored date_range, then the formatted start/end dates,
    then "DATE TBD".
    """
    stored = record.get("date_range")
    if stored:
        return stored
    formatted = format_date_range(record.get("start_date"), record.get("end_date"))
    return formatted or DATE_TBD
