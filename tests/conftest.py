"""Pytest configuration and shared fixtures for HabitGrid tests.

Everything runs against a controllable clock so day boundaries and
"today"-relative aggregation can be exercised deterministically.
"""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from habitgrid.config import TestConfig
from habitgrid.context import create_app_context
from habitgrid.services.habits import HabitStore


class FakeClock:
    """Callable clock that tests can move forward by hand."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now

    def set(self, moment: datetime) -> None:
        self.now = moment


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep developer .env settings out of the test run."""
    for name in (
        "HABITGRID_DATA_DIR",
        "HABITGRID_DEV_MODE",
        "HABITGRID_ROLLOVER_INTERVAL",
        "HABITGRID_ROLLOVER_MODE",
        "HABITGRID_SWIPE_THRESHOLD",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HABITGRID_DATA_DIR", str(tmp_path / "data"))


@pytest.fixture
def clock() -> FakeClock:
    """Clock parked mid-morning on the 10th of a 30-day month (June 2024)."""
    return FakeClock(datetime(2024, 6, 10, 9, 30))


@pytest.fixture
def config(tmp_path) -> TestConfig:
    return TestConfig(data_dir=tmp_path / "data")


@pytest.fixture
def store() -> HabitStore:
    return HabitStore()


@pytest.fixture
def ctx(config, clock):
    """Application context on the fake clock; the timer is stopped on teardown."""
    context = create_app_context(config, clock=clock)
    yield context
    context.close()


@pytest.fixture
def habit_factory(store):
    """Create habits in ``store`` and return the Habit objects."""

    def _create_habit(name: str = "Read"):
        habit_id = store.add_habit(name)
        assert habit_id is not None
        return store.get(habit_id)

    return _create_habit
