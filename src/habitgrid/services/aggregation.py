"""Derived completion figures for the daily, monthly and yearly pages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..models.habit import Habit
from .dates import DateKey, DayStatus, classify, dates_in_month
from .habits import was_completed_on

MONTHS_PER_YEAR = 12


@dataclass(frozen=True)
class DayCell:
    """One square of a habit's month calendar."""

    date: DateKey
    completed: bool
    status: DayStatus

    @property
    def is_today(self) -> bool:
        return self.status is DayStatus.TODAY

    @property
    def is_future(self) -> bool:
        return self.status is DayStatus.FUTURE


def daily_progress(habits: Sequence[Habit]) -> float:
    """Percentage of habits ticked off today; ``0.0`` when there are none."""

    if not habits:
        return 0.0
    done = sum(1 for habit in habits if habit.completed_today)
    return done / len(habits) * 100


def monthly_completion(habit: Habit, year: int, month: int, today: DateKey) -> float:
    """Completion percentage over the days of a month that have already started.

    Days after ``today`` are left out of both the count and the total, so a
    habit is never penalized for days that have not happened yet. A month lying
    entirely in the future yields ``0.0``. Days before the habit existed count
    as missed.
    """

    elapsed = [
        key for key in dates_in_month(year, month) if classify(key, today) is not DayStatus.FUTURE
    ]
    if not elapsed:
        return 0.0
    done = sum(1 for key in elapsed if was_completed_on(habit, key))
    return done / len(elapsed) * 100


def yearly_completion(habit: Habit, year: int, today: DateKey) -> list[float]:
    """Twelve monthly percentages, January first."""

    return [monthly_completion(habit, year, month, today) for month in range(MONTHS_PER_YEAR)]


def day_cells(habit: Habit, year: int, month: int, today: DateKey) -> list[DayCell]:
    """Per-day completion and past/today/future status for the month grid."""

    return [
        DayCell(date=key, completed=was_completed_on(habit, key), status=classify(key, today))
        for key in dates_in_month(year, month)
    ]


def format_percentage(value: float, places: int = 1) -> str:
    """Display helper, e.g. ``33.3%``; the core itself never rounds."""

    return f"{value:.{places}f}%"


__all__ = [
    "DayCell",
    "daily_progress",
    "day_cells",
    "format_percentage",
    "monthly_completion",
    "yearly_completion",
]
