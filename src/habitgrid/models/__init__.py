"""Domain model exports."""

from .habit import CompletionEntry, Habit
from .view_state import PERIOD_ORDER, Period, ViewState

__all__ = [
    "CompletionEntry",
    "Habit",
    "PERIOD_ORDER",
    "Period",
    "ViewState",
]
