"""Display state for the daily/monthly/yearly pages."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Period(str, Enum):
    """Display granularity, in swipe order."""

    DAILY = "daily"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @property
    def index(self) -> int:
        return PERIOD_ORDER.index(self)


PERIOD_ORDER: tuple[Period, ...] = (Period.DAILY, Period.MONTHLY, Period.YEARLY)


@dataclass
class ViewState:
    """Which page is showing and which month/year the calendars display."""

    active_period: Period
    displayed_month: int
    displayed_year: int
