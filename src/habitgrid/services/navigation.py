"""Page and calendar navigation for the daily/monthly/yearly views."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Optional

from ..logging_config import get_logger
from ..models.view_state import PERIOD_ORDER, Period, ViewState

logger = get_logger(__name__)

DEFAULT_SWIPE_THRESHOLD = 50.0


class SwipeDirection(str, Enum):
    """Direction of a horizontal swipe; LEFT moves toward coarser periods."""

    LEFT = "left"
    RIGHT = "right"


def _valid_month(month: int) -> bool:
    return 0 <= month <= 11


class Navigator:
    """State machine over the active period and the displayed month/year.

    Gestures step one adjacent period at a time; explicit selection may jump
    straight between any two periods. Month and year navigation never touch
    the active period, except :meth:`select_month`.
    """

    def __init__(
        self,
        *,
        today: Optional[date] = None,
        swipe_threshold: float = DEFAULT_SWIPE_THRESHOLD,
        state: Optional[ViewState] = None,
    ) -> None:
        if swipe_threshold < 0:
            raise ValueError("swipe_threshold must not be negative")
        self.swipe_threshold = swipe_threshold
        if state is None:
            today = today or date.today()
            state = ViewState(
                active_period=Period.DAILY,
                displayed_month=today.month - 1,
                displayed_year=today.year,
            )
        self.state = state

    @property
    def active_period(self) -> Period:
        return self.state.active_period

    @property
    def page_index(self) -> int:
        """Position of the active page in the horizontal pager."""
        return self.state.active_period.index

    def set_active_period(self, period: Period) -> None:
        period = Period(period)
        if period is not self.state.active_period:
            logger.debug(
                "Period changed",
                extra={"from_period": self.state.active_period.value, "to_period": period.value},
            )
        self.state.active_period = period

    def step_forward(self) -> bool:
        """Move one period coarser (Daily -> Monthly -> Yearly); False at the end."""
        index = self.page_index
        if index >= len(PERIOD_ORDER) - 1:
            return False
        self.set_active_period(PERIOD_ORDER[index + 1])
        return True

    def step_back(self) -> bool:
        """Move one period finer (Yearly -> Monthly -> Daily); False at the start."""
        index = self.page_index
        if index <= 0:
            return False
        self.set_active_period(PERIOD_ORDER[index - 1])
        return True

    def handle_swipe(self, direction: SwipeDirection, magnitude: float) -> bool:
        """Apply a directional intent; swipes shorter than the threshold are ignored."""

        if abs(magnitude) < self.swipe_threshold:
            return False
        if SwipeDirection(direction) is SwipeDirection.LEFT:
            return self.step_forward()
        return self.step_back()

    def handle_drag(self, delta_x: float) -> bool:
        """Translate a pointer delta (start x minus current x) into a swipe.

        A positive delta means the pointer moved left.
        """

        if delta_x == 0:
            return False
        direction = SwipeDirection.LEFT if delta_x > 0 else SwipeDirection.RIGHT
        return self.handle_swipe(direction, abs(delta_x))

    def previous_month(self) -> None:
        if self.state.displayed_month == 0:
            self.state.displayed_month = 11
            self.state.displayed_year -= 1
        else:
            self.state.displayed_month -= 1

    def next_month(self) -> None:
        if self.state.displayed_month == 11:
            self.state.displayed_month = 0
            self.state.displayed_year += 1
        else:
            self.state.displayed_month += 1

    def previous_year(self) -> None:
        self.state.displayed_year -= 1

    def next_year(self) -> None:
        self.state.displayed_year += 1

    def select_month(self, month: int) -> bool:
        """Open a month from the yearly grid; out-of-range months are ignored."""

        if not _valid_month(month):
            logger.debug("Ignoring invalid month selection", extra={"month": month})
            return False
        self.state.displayed_month = month
        self.set_active_period(Period.MONTHLY)
        return True


__all__ = ["DEFAULT_SWIPE_THRESHOLD", "Navigator", "SwipeDirection"]
