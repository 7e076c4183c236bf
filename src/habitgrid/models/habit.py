"""Habit tracking data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from ..services.dates import DateKey


@dataclass
class CompletionEntry:
    """Completion state recorded for one habit on one calendar day."""

    date: DateKey
    completed: bool

    def to_record(self) -> dict[str, Any]:
        return {"date": self.date, "completed": self.completed}


@dataclass
class Habit:
    """A named daily habit plus its per-date completion history.

    ``completed_today`` caches the ``completed`` value of today's history entry
    (``False`` when there is none). History holds at most one entry per date.
    """

    id: int
    name: str
    completed_today: bool = False
    history: list[CompletionEntry] = field(default_factory=list)

    def entry_for(self, key: DateKey) -> Optional[CompletionEntry]:
        """Return the history entry recorded for ``key``, if any."""
        for entry in self.history:
            if entry.date == key:
                return entry
        return None

    def to_record(self) -> dict[str, Any]:
        """Serializable form; ``completed_today`` is derived, so it is left out."""
        return {
            "id": self.id,
            "name": self.name,
            "history": [entry.to_record() for entry in self.history],
        }
