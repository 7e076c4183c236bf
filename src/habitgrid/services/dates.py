"""Calendar helpers built around ISO ``YYYY-MM-DD`` date keys.

Months are 0-based throughout the package (0 = January, 11 = December) so the
view state can step through them with plain modular arithmetic.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime
from enum import Enum
from typing import Callable, Optional

DateKey = str
Clock = Callable[[], datetime]

WEEK_LENGTH = 7


class DayStatus(str, Enum):
    """Where a calendar day sits relative to today."""

    PAST = "past"
    TODAY = "today"
    FUTURE = "future"


def date_key(instant: date | datetime) -> DateKey:
    """Canonicalize a date or (local, naive) datetime to ``YYYY-MM-DD``."""

    if isinstance(instant, datetime):
        instant = instant.date()
    return instant.isoformat()


def parse_date_key(key: DateKey) -> date:
    """Inverse of :func:`date_key`."""

    return date.fromisoformat(key)


def today_key(clock: Optional[Clock] = None) -> DateKey:
    """Return today's key according to ``clock`` (defaults to the local wall clock)."""

    now = clock() if clock is not None else datetime.now()
    return date_key(now)


def days_in_month(year: int, month: int) -> int:
    """Length of a 0-based month, leap years included."""

    return calendar.monthrange(year, month + 1)[1]


def dates_in_month(year: int, month: int) -> list[DateKey]:
    """Every date key of the month, ascending."""

    return [
        date_key(date(year, month + 1, day))
        for day in range(1, days_in_month(year, month) + 1)
    ]


def month_weeks(year: int, month: int) -> list[list[DateKey]]:
    """Month dates chunked into rows of seven, the way the month grid lays them out."""

    dates = dates_in_month(year, month)
    return [dates[i : i + WEEK_LENGTH] for i in range(0, len(dates), WEEK_LENGTH)]


def classify(key: DateKey, today: DateKey) -> DayStatus:
    """Classify ``key`` against ``today``; zero-padded keys compare chronologically."""

    if key == today:
        return DayStatus.TODAY
    if key > today:
        return DayStatus.FUTURE
    return DayStatus.PAST


def month_name(month: int) -> str:
    return calendar.month_name[month + 1]


def short_month_name(month: int) -> str:
    return calendar.month_abbr[month + 1]


__all__ = [
    "Clock",
    "DateKey",
    "DayStatus",
    "classify",
    "date_key",
    "dates_in_month",
    "days_in_month",
    "month_name",
    "month_weeks",
    "parse_date_key",
    "short_month_name",
    "today_key",
]
