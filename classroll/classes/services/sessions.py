"""Session calendar helpers.

Months are 1-based (January = 1) and weekdays count from Sunday = 0 to
Saturday = 6.
"""

from __future__ import annotations

import calendar
import datetime

from classroll.core.constants import MAX_YEAR, MIN_YEAR

DATE_FORMAT = "%Y-%m-%d"
DAYS_PER_WEEK = 7


def _python_weekday(weekday: int) -> int:
    """Convert a Sunday-based weekday into ``datetime.weekday()`` numbering."""
    return (weekday - 1) % DAYS_PER_WEEK


def session_dates(year: int, month: int, weekday: int) -> list[datetime.date]:
    """Return every date in the month falling on ``weekday``, in order.

    Invalid input yields an empty list rather than an error.
    """
    if not (MIN_YEAR <= year <= MAX_YEAR and 1 <= month <= 12):
        return []
    if not 0 <= weekday < DAYS_PER_WEEK:
        return []

    first = datetime.date(year, month, 1)
    offset = (_python_weekday(weekday) - first.weekday()) % DAYS_PER_WEEK
    _, days_in_month = calendar.monthrange(year, month)
    return [
        datetime.date(year, month, day)
        for day in range(1 + offset, days_in_month + 1, DAYS_PER_WEEK)
    ]


def is_session_day(day: datetime.date, weekday: int) -> bool:
    """Check whether ``day`` falls on the session weekday."""
    return day.weekday() == _python_weekday(weekday)


def format_session_date(day: datetime.date) -> str:
    """Format a session date the way snapshots store it."""
    return day.strftime(DATE_FORMAT)


def parse_session_date(value: str) -> datetime.date:
    """Parse a stored ``YYYY-MM-DD`` session date."""
    return datetime.datetime.strptime(value, DATE_FORMAT).date()


def period_label(year: int, month: int) -> str:
    """Human label for a reporting period, e.g. ``3/2025``."""
    return f"{month}/{year}"


def record_id_for(year: int, month: int) -> str:
    """Deterministic snapshot id for a period."""
    return f"{year}-{month}"
