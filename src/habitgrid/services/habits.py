"""In-memory habit store: the authoritative habit collection and its history."""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Mapping, Optional

from ..logging_config import get_logger
from ..models.habit import CompletionEntry, Habit
from .dates import DateKey, date_key, parse_date_key

logger = get_logger(__name__)


def was_completed_on(habit: Habit, key: DateKey) -> bool:
    """Return the recorded completion for ``key``; days without an entry count as not done."""

    entry = habit.entry_for(key)
    return entry.completed if entry is not None else False


def _clean_name(name: Optional[str]) -> str:
    return (name or "").strip()


class HabitStore:
    """Ordered collection of habits keyed by a monotonically increasing id.

    Invalid input (blank names, unknown ids) is a silent no-op reported through
    the return value. Callers must serialize access; the store does no locking.
    """

    def __init__(self) -> None:
        self._habits: list[Habit] = []
        self._last_id = 0

    def __len__(self) -> int:
        return len(self._habits)

    def __iter__(self) -> Iterator[Habit]:
        return iter(tuple(self._habits))

    @property
    def habits(self) -> tuple[Habit, ...]:
        """Read-only view of the collection in display order."""
        return tuple(self._habits)

    def get(self, habit_id: int) -> Optional[Habit]:
        for habit in self._habits:
            if habit.id == habit_id:
                return habit
        return None

    def _next_id(self) -> int:
        current_max = max((h.id for h in self._habits), default=0)
        # Deleting the newest habit must not free its id for reuse.
        return max(current_max, self._last_id) + 1

    def add_habit(self, name: str) -> Optional[int]:
        """Append a new habit and return its id, or ``None`` for a blank name."""

        clean = _clean_name(name)
        if not clean:
            logger.debug("Ignoring add with blank habit name")
            return None

        habit_id = self._next_id()
        self._habits.append(Habit(id=habit_id, name=clean))
        self._last_id = habit_id
        logger.info("Habit added", extra={"habit_id": habit_id, "habit_name": clean})
        return habit_id

    def rename_habit(self, habit_id: int, new_name: str) -> bool:
        clean = _clean_name(new_name)
        habit = self.get(habit_id)
        if habit is None or not clean:
            logger.debug("Ignoring rename", extra={"habit_id": habit_id})
            return False

        habit.name = clean
        logger.info("Habit renamed", extra={"habit_id": habit_id, "habit_name": clean})
        return True

    def delete_habit(self, habit_id: int) -> bool:
        habit = self.get(habit_id)
        if habit is None:
            logger.debug("Ignoring delete of unknown habit", extra={"habit_id": habit_id})
            return False

        self._habits.remove(habit)
        logger.info("Habit deleted", extra={"habit_id": habit_id})
        return True

    def toggle_habit(self, habit_id: int, today: DateKey) -> Optional[bool]:
        """Flip today's completion for a habit and upsert today's history entry.

        Returns the new ``completed_today`` value, or ``None`` when the id is
        unknown. The new value is derived from today's entry so the cached
        flag and the history cannot disagree.
        """

        habit = self.get(habit_id)
        if habit is None:
            logger.debug("Ignoring toggle of unknown habit", extra={"habit_id": habit_id})
            return None

        completed = not was_completed_on(habit, today)
        entry = habit.entry_for(today)
        if entry is not None:
            entry.completed = completed
        else:
            habit.history.append(CompletionEntry(date=today, completed=completed))
        habit.completed_today = completed

        logger.info(
            "Habit toggled",
            extra={"habit_id": habit_id, "date": today, "completed": completed},
        )
        return completed

    def sync_completed_today(self, today: DateKey) -> int:
        """Re-derive every ``completed_today`` flag from the entry for ``today``.

        History is left alone. On a fresh day this clears every flag. Returns
        the number of habits whose flag changed.
        """

        changed = 0
        for habit in self._habits:
            completed = was_completed_on(habit, today)
            if habit.completed_today != completed:
                changed += 1
            habit.completed_today = completed
        return changed

    def snapshot(self) -> list[dict[str, Any]]:
        """Return ``{id, name, history}`` records for an external persistence layer."""

        return [habit.to_record() for habit in self._habits]

    @classmethod
    def from_snapshot(
        cls, records: Iterable[Mapping[str, Any]], today: DateKey
    ) -> "HabitStore":
        """Rebuild a store from :meth:`snapshot` records.

        ``completed_today`` is re-derived from each habit's entry for ``today``.
        Dates are stored in canonical ``YYYY-MM-DD`` form; duplicate dates
        collapse to the last value seen.

        Raises:
            ValueError: if a record is missing fields, has a blank or
                non-string name, repeats an id, carries a date that is not
                ``YYYY-MM-DD`` or a non-boolean ``completed``.
        """

        store = cls()
        seen: set[int] = set()
        for record in records:
            try:
                habit_id = int(record["id"])
                raw_name = record["name"]
                raw_history = record.get("history") or []
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                raise ValueError(f"Malformed habit record: {record!r}") from exc
            if not isinstance(raw_name, str):
                raise ValueError(f"Habit {habit_id} name must be a string, got {raw_name!r}")
            name = _clean_name(raw_name)
            if not name:
                raise ValueError(f"Habit {habit_id} has a blank name")
            if habit_id in seen:
                raise ValueError(f"Duplicate habit id {habit_id}")
            seen.add(habit_id)

            habit = Habit(id=habit_id, name=name)
            for raw in raw_history:
                key, completed = _parse_history_entry(habit_id, raw)
                existing = habit.entry_for(key)
                if existing is not None:
                    existing.completed = completed
                else:
                    habit.history.append(CompletionEntry(date=key, completed=completed))
            habit.completed_today = was_completed_on(habit, today)
            store._habits.append(habit)

        store._last_id = max(seen, default=0)
        logger.info("Habit store restored", extra={"habit_count": len(store)})
        return store


def _parse_history_entry(habit_id: int, raw: Any) -> tuple[DateKey, bool]:
    """Validate one snapshot history entry; only canonical date keys are accepted."""

    try:
        key = raw["date"]
        completed = raw["completed"]
    except (KeyError, TypeError) as exc:
        raise ValueError(f"Malformed history entry for habit {habit_id}: {raw!r}") from exc
    try:
        canonical = date_key(parse_date_key(key)) if isinstance(key, str) else None
    except ValueError:
        canonical = None
    # fromisoformat also takes basic and week forms such as "20240610".
    if canonical is None or canonical != key:
        raise ValueError(f"History date for habit {habit_id} is not YYYY-MM-DD: {key!r}")
    if not isinstance(completed, bool):
        raise ValueError(
            f"History 'completed' for habit {habit_id} must be a boolean, got {completed!r}"
        )
    return key, completed


__all__ = ["HabitStore", "was_completed_on"]
