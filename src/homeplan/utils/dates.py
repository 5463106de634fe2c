"""Calendar arithmetic helpers used by the recurrence engine.

Dates here are plain ``datetime.date`` values; no time of day or
timezone is involved.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta


def days_in_month(year: int, month: int) -> int:
    """Return the number of days in ``month`` of ``year``."""
    return calendar.monthrange(year, month)[1]


def month_index(value: date) -> int:
    """Absolute month number (year * 12 + zero-based month)."""
    return value.year * 12 + value.month - 1


def from_month_index(index: int) -> tuple[int, int]:
    """Inverse of :func:`month_index`, returning ``(year, month)``."""
    year, month0 = divmod(index, 12)
    return year, month0 + 1


def start_of_week(value: date) -> date:
    """Monday of the week containing ``value``."""
    return value - timedelta(days=value.weekday())


def nth_weekday_of_month(year: int, month: int, weekday: int, nth: int) -> date | None:
    """Return the nth ``weekday`` (Monday=0) of a month.

    Negative ``nth`` counts from the end of the month (-1 = last). Returns
    None when the month has fewer than ``abs(nth)`` such weekdays.
    """
    last_day = days_in_month(year, month)
    if nth > 0:
        first = date(year, month, 1)
        day = 1 + (weekday - first.weekday()) % 7 + (nth - 1) * 7
    else:
        last = date(year, month, last_day)
        day = last_day - (last.weekday() - weekday) % 7 + (nth + 1) * 7
    if day < 1 or day > last_day:
        return None
    return date(year, month, day)


def parse_date(value: str | date) -> date:
    """Parse an ISO date (``YYYY-MM-DD``) or ISO datetime into a date.

    Raises:
        ValueError: If the string is not an ISO 8601 date or datetime
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        return datetime.fromisoformat(text).date()
