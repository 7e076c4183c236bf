"""Day-boundary detection for the "done today" flags."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from ..logging_config import get_logger
from .dates import Clock, DateKey, date_key
from .habits import HabitStore

logger = get_logger(__name__)

RolloverListener = Callable[[DateKey, DateKey], None]


class DayRolloverWatcher:
    """Notice when the local date changes and re-derive ``completed_today``.

    History is never modified: yesterday's entries keep whatever value was last
    toggled. Each :meth:`check` is cheap and can be called from a timer tick or
    before any command.
    """

    def __init__(self, store: HabitStore, *, clock: Optional[Clock] = None) -> None:
        self.store = store
        self.clock: Clock = clock or datetime.now
        self._current_day = date_key(self.clock())
        self._listeners: list[RolloverListener] = []

    @property
    def current_day(self) -> DateKey:
        return self._current_day

    def on_rollover(self, listener: RolloverListener) -> None:
        """Register ``listener(previous_day, new_day)``, called after each rollover."""
        self._listeners.append(listener)

    def check(self, now: Optional[datetime] = None) -> bool:
        """Return True when a day boundary was crossed since the last check."""

        new_day = date_key(now if now is not None else self.clock())
        if new_day == self._current_day:
            return False

        previous_day = self._current_day
        self._current_day = new_day
        changed = self.store.sync_completed_today(new_day)
        logger.info(
            "Day rollover",
            extra={"previous_day": previous_day, "new_day": new_day, "flags_changed": changed},
        )
        for listener in self._listeners:
            listener(previous_day, new_day)
        return True


__all__ = ["DayRolloverWatcher", "RolloverListener"]
