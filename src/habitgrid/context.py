"""Application context: the single owner of habit and view state."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional

from .config import BaseConfig
from .devtools import dev_log
from .logging_config import get_logger
from .models.habit import Habit
from .models.view_state import Period, ViewState
from .scheduler import RolloverScheduler, create_scheduler
from .services import aggregation
from .services.aggregation import DayCell
from .services.dates import Clock, DateKey, parse_date_key
from .services.habits import HabitStore, was_completed_on
from .services.navigation import Navigator, SwipeDirection
from .services.rollover import DayRolloverWatcher

logger = get_logger(__name__)


@dataclass
class AppContext:
    """Query and command surface handed to the presentation layer.

    Every call takes ``lock`` so the rollover timer thread and UI events never
    mutate the store at the same time. Commands first catch up with a missed
    day boundary, so ``today`` always matches the clock.
    """

    config: BaseConfig
    clock: Clock
    store: HabitStore
    navigator: Navigator
    watcher: DayRolloverWatcher
    lock: threading.RLock = field(default_factory=threading.RLock)
    scheduler: Optional[RolloverScheduler] = None

    # Queries

    @property
    def today(self) -> DateKey:
        with self.lock:
            self.watcher.check()
            return self.watcher.current_day

    @property
    def habits(self) -> tuple[Habit, ...]:
        with self.lock:
            self.watcher.check()
            return self.store.habits

    @property
    def view_state(self) -> ViewState:
        """Copy of the navigation state; mutate through the navigation commands."""
        with self.lock:
            state = self.navigator.state
            return ViewState(state.active_period, state.displayed_month, state.displayed_year)

    def get_habit(self, habit_id: int) -> Optional[Habit]:
        with self.lock:
            return self.store.get(habit_id)

    def daily_progress(self) -> float:
        with self.lock:
            self.watcher.check()
            return aggregation.daily_progress(self.store.habits)

    def was_completed_on(self, habit: Habit, key: DateKey) -> bool:
        with self.lock:
            return was_completed_on(habit, key)

    def monthly_completion(
        self, habit: Habit, year: Optional[int] = None, month: Optional[int] = None
    ) -> float:
        """Completion for a month, defaulting to the displayed month."""
        with self.lock:
            year, month = self._resolve_month(year, month)
            return aggregation.monthly_completion(habit, year, month, self.today)

    def yearly_completion(self, habit: Habit, year: Optional[int] = None) -> list[float]:
        with self.lock:
            if year is None:
                year = self.navigator.state.displayed_year
            return aggregation.yearly_completion(habit, year, self.today)

    def day_cells(
        self, habit: Habit, year: Optional[int] = None, month: Optional[int] = None
    ) -> list[DayCell]:
        with self.lock:
            year, month = self._resolve_month(year, month)
            return aggregation.day_cells(habit, year, month, self.today)

    def snapshot(self) -> list[dict[str, Any]]:
        with self.lock:
            return self.store.snapshot()

    def _resolve_month(self, year: Optional[int], month: Optional[int]) -> tuple[int, int]:
        state = self.navigator.state
        return (
            state.displayed_year if year is None else year,
            state.displayed_month if month is None else month,
        )

    # Habit commands

    def add_habit(self, name: str) -> Optional[int]:
        with self.lock:
            self.watcher.check()
            habit_id = self.store.add_habit(name)
        if habit_id is None:
            dev_log(self.config, "Habit add ignored", context={"name": repr(name)})
        return habit_id

    def rename_habit(self, habit_id: int, name: str) -> bool:
        with self.lock:
            return self.store.rename_habit(habit_id, name)

    def delete_habit(self, habit_id: int) -> bool:
        with self.lock:
            return self.store.delete_habit(habit_id)

    def toggle_habit(self, habit_id: int) -> Optional[bool]:
        with self.lock:
            return self.store.toggle_habit(habit_id, self.today)

    def restore(self, records: Iterable[Mapping[str, Any]]) -> None:
        """Replace the collection with snapshot records from a persistence layer."""
        with self.lock:
            self.watcher.check()
            self.store = HabitStore.from_snapshot(records, self.watcher.current_day)
            self.watcher.store = self.store

    # Navigation commands

    def set_active_period(self, period: Period) -> None:
        with self.lock:
            self.navigator.set_active_period(period)

    def handle_swipe(self, direction: SwipeDirection, magnitude: float) -> bool:
        with self.lock:
            return self.navigator.handle_swipe(direction, magnitude)

    def handle_drag(self, delta_x: float) -> bool:
        with self.lock:
            return self.navigator.handle_drag(delta_x)

    def previous_month(self) -> None:
        with self.lock:
            self.navigator.previous_month()

    def next_month(self) -> None:
        with self.lock:
            self.navigator.next_month()

    def previous_year(self) -> None:
        with self.lock:
            self.navigator.previous_year()

    def next_year(self) -> None:
        with self.lock:
            self.navigator.next_year()

    def select_month(self, month: int) -> bool:
        with self.lock:
            return self.navigator.select_month(month)

    # Lifecycle

    def check_rollover(self) -> bool:
        """Timer entry point: re-derive the daily flags when the date has changed."""
        with self.lock:
            return self.watcher.check()

    def start(self) -> RolloverScheduler:
        """Start the rollover timer (idempotent)."""
        with self.lock:
            if self.scheduler is None:
                self.scheduler = create_scheduler(self)
            if not self.scheduler.running:
                self.scheduler.start()
            return self.scheduler

    def close(self) -> None:
        """Stop the rollover timer so no recurring job outlives the context."""
        with self.lock:
            scheduler, self.scheduler = self.scheduler, None
        # Shut down outside the lock; a tick may be waiting on it.
        if scheduler is not None:
            scheduler.stop()


def create_app_context(
    config: Optional[BaseConfig] = None,
    *,
    clock: Optional[Clock] = None,
    auto_start: bool = False,
) -> AppContext:
    """Create the application context with an empty habit collection."""

    if config is None:
        config = BaseConfig()
    clock = clock or datetime.now

    store = HabitStore()
    watcher = DayRolloverWatcher(store, clock=clock)
    navigator = Navigator(
        today=parse_date_key(watcher.current_day),
        swipe_threshold=config.SWIPE_THRESHOLD,
    )

    ctx = AppContext(
        config=config,
        clock=clock,
        store=store,
        navigator=navigator,
        watcher=watcher,
    )
    logger.info("App context created", extra={"today": watcher.current_day})
    if auto_start:
        ctx.start()
    return ctx
