"""
Search and date-range filters for the event listing.

Date presets are resolved against the server's local "today". Weeks start on
Monday. Ranges are inclusive on both ends and returned as ISO date strings,
which compare correctly against the stored `date` column as text.
"""

import calendar
from datetime import date, timedelta
from typing import Optional, Tuple

from backend.common.errors import ValidationError

ALL = "all"
CURRENT_WEEK = "current-week"
LAST_WEEK = "last-week"
CURRENT_MONTH = "current-month"
LAST_MONTH = "last-month"

PRESETS = (ALL, CURRENT_WEEK, LAST_WEEK, CURRENT_MONTH, LAST_MONTH)

DateRange = Tuple[str, str]


def week_bounds(day: date) -> Tuple[date, date]:
    """Monday and Sunday of the week containing `day`."""
    monday = day - timedelta(days=day.weekday())
    return monday, monday + timedelta(days=6)


def month_bounds(day: date) -> Tuple[date, date]:
    """First and last calendar day of the month containing `day`."""
    last_day = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last_day)


def resolve_date_range(preset: Optional[str], today: Optional[date] = None) -> Optional[DateRange]:
    """
    Turn a named preset into an inclusive (start, end) pair of ISO dates.

    Args:
        preset (str): One of PRESETS, or None/empty for no filter.
        today (date, optional): Anchor date; defaults to date.today().

    Returns:
        tuple: (start, end) as "YYYY-MM-DD" strings, or None when the preset
               applies no date filter.

    Raises:
        ValidationError: If the preset is not recognised.
    """
    if not preset or preset == ALL:
        return None

    today = today or date.today()

    if preset == CURRENT_WEEK:
        start, end = week_bounds(today)
    elif preset == LAST_WEEK:
        start, end = week_bounds(today - timedelta(days=7))
    elif preset == CURRENT_MONTH:
        start, end = month_bounds(today)
    elif preset == LAST_MONTH:
        start, end = month_bounds(today.replace(day=1) - timedelta(days=1))
    else:
        raise ValidationError(f"filter must be one of: {', '.join(PRESETS)}")

    return start.isoformat(), end.isoformat()


def title_pattern(search: Optional[str]) -> Optional[str]:
    """
    Build an ILIKE pattern for a case-insensitive substring match on title.

    LIKE wildcards in the user's text are escaped so they match literally.
    Returns None when there is nothing to search for.
    """
    if not search or not search.strip():
        return None

    escaped = (
        search.strip()
        .replace("\\", "\\\\")
        .replace("%", "\\%")
        .replace("_", "\\_")
    )
    return f"%{escaped}%"
