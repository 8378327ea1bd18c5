"""
Shared date handling for series date strings.

Series dates stay opaque sortable strings in one of three canonical forms
until a consumer needs arithmetic:

    YYYY-MM-DD   daily
    YYYY-MM      monthly
    YYYY-Www     weekly

This module is the single place that turns them into datetimes (for
regression and lookback windows) or coarsens them to months (for
cross-granularity alignment).
"""

import math
import re
from datetime import datetime, timedelta
from typing import Optional


DAILY_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
MONTHLY_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")
WEEKLY_PATTERN = re.compile(r"^(\d{4})-W(\d{2})$")
# Parsing is a little more lenient than normalization about week digits
WEEKLY_PARSE_PATTERN = re.compile(r"^(\d{4})-W(\d{1,2})$")

# Average weeks per month used by the week -> month approximation
WEEKS_PER_MONTH: float = 4.33

# Day of month a monthly date is anchored to when parsed
MID_MONTH_DAY: int = 15

SECONDS_PER_DAY: int = 24 * 60 * 60


def parse_series_date(value: str) -> Optional[datetime]:
    """
    Parse a series date string to a naive datetime.

    - YYYY-MM-DD: midnight of that day (ISO timestamps are also accepted and
      converted to naive UTC)
    - YYYY-MM: the 15th of that month
    - YYYY-Www: January 1st plus (week - 1) * 7 days; a simple offset, not
      ISO-8601 week numbering

    Returns:
        The parsed datetime, or None if the string is not a recognised date.
    """
    if not isinstance(value, str):
        return None

    try:
        match = WEEKLY_PARSE_PATTERN.match(value)
        if match:
            year, week = int(match.group(1)), int(match.group(2))
            return datetime(year, 1, 1) + timedelta(days=(week - 1) * 7)

        match = MONTHLY_PATTERN.match(value)
        if match:
            return datetime(int(match.group(1)), int(match.group(2)), MID_MONTH_DAY)

        match = DAILY_PATTERN.match(value)
        if match:
            return datetime(int(match.group(1)), int(match.group(2)), int(match.group(3)))

        parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        return None

    if parsed.tzinfo is not None:
        parsed = (parsed - parsed.utcoffset()).replace(tzinfo=None)
    return parsed


def days_between(start: datetime, end: datetime) -> float:
    """Fractional number of days from start to end."""
    return (end - start).total_seconds() / SECONDS_PER_DAY


def normalize_date_format(value: str) -> str:
    """
    Coarsen a series date to YYYY-MM for cross-granularity comparison.

    YYYY-MM-DD is truncated. YYYY-Www maps to month ceil(week / 4.33),
    clamped to 12. The week mapping is deliberately approximate (it is not
    calendar-exact) and chart alignment depends on it. Unrecognised strings
    are returned unchanged.
    """
    if MONTHLY_PATTERN.match(value):
        return value
    if DAILY_PATTERN.match(value):
        return value[:7]
    match = WEEKLY_PATTERN.match(value)
    if match:
        year = int(match.group(1))
        week = int(match.group(2))
        month = max(1, min(12, math.ceil(week / WEEKS_PER_MONTH)))
        return f"{year}-{month:02d}"
    return value


def format_month(moment: datetime) -> str:
    """Format a datetime as YYYY-MM."""
    return f"{moment.year}-{moment.month:02d}"


def shift_months(moment: datetime, months: int) -> datetime:
    """
    Move a datetime by a whole number of calendar months.

    The day is clamped to the target month's length (Mar 31 - 1 month is
    Feb 28/29).
    """
    index = moment.year * 12 + (moment.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    next_month = datetime(year + (month // 12), (month % 12) + 1, 1)
    last_day = (next_month - timedelta(days=1)).day
    return moment.replace(year=year, month=month, day=min(moment.day, last_day))
