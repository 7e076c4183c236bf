"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

ROLLOVER_MODES = ("interval", "midnight")


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_float(name: str, default: float) -> float:
    """Read a numeric environment variable, raising on garbage."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {value!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "HabitGrid"
    LOG_FILENAME = "habitgrid.log"
    ROLLOVER_JOB_ID = "day_rollover"
    DEFAULT_ROLLOVER_INTERVAL = 60.0
    DEFAULT_SWIPE_THRESHOLD = 50.0

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("HABITGRID_DEV_MODE", default=True)
        self.ROLLOVER_INTERVAL_SECONDS = _env_float(
            "HABITGRID_ROLLOVER_INTERVAL", self.DEFAULT_ROLLOVER_INTERVAL
        )
        self.ROLLOVER_MODE = os.getenv("HABITGRID_ROLLOVER_MODE", "interval").strip().lower()
        self.SWIPE_THRESHOLD = _env_float(
            "HABITGRID_SWIPE_THRESHOLD", self.DEFAULT_SWIPE_THRESHOLD
        )
        self.validate()

    def validate(self) -> None:
        """Reject settings the core cannot run with."""

        if self.ROLLOVER_INTERVAL_SECONDS <= 0:
            raise ValueError("HABITGRID_ROLLOVER_INTERVAL must be greater than zero.")
        if self.ROLLOVER_MODE not in ROLLOVER_MODES:
            raise ValueError(
                f"HABITGRID_ROLLOVER_MODE must be one of {', '.join(ROLLOVER_MODES)}; "
                f"got {self.ROLLOVER_MODE!r}."
            )
        if self.SWIPE_THRESHOLD < 0:
            raise ValueError("HABITGRID_SWIPE_THRESHOLD must not be negative.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where log files live."""

        data_root = os.getenv("HABITGRID_DATA_DIR", "instance")
        base_path = Path(data_root).expanduser()
        try:
            path = base_path.resolve()
            path.mkdir(parents=True, exist_ok=True)
            return path
        except PermissionError:
            # Protected install locations fall back to user-local storage.
            fallback_path = Path.home() / f".{self.APP_NAME.lower()}"
            fallback_path.mkdir(parents=True, exist_ok=True)
            return fallback_path.resolve()


class DevConfig(BaseConfig):
    """Development configuration: verbose console output regardless of env."""

    def __init__(self) -> None:
        super().__init__()
        self.DEV_MODE = True


class TestConfig(DevConfig):
    """Dev configuration with the data directory pinned, for the test-suite."""

    __test__ = False

    def __init__(self, data_dir: Path | None = None) -> None:
        super().__init__()
        if data_dir is not None:
            self.DATA_DIR = Path(data_dir)
