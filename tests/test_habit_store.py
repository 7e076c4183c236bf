"""Tests for the in-memory habit store.

Covers id assignment, blank-name handling, toggle upserts and the snapshot
records handed to an external persistence layer.
"""

from __future__ import annotations

import pytest

from habitgrid.models.habit import CompletionEntry
from habitgrid.services.aggregation import monthly_completion
from habitgrid.services.habits import HabitStore, was_completed_on

TODAY = "2024-06-10"


class TestAddHabit:
    """Creating habits."""

    def test_first_habit_gets_id_one(self, store):
        assert store.add_habit("Read") == 1

    def test_new_habit_starts_empty(self, store):
        habit = store.get(store.add_habit("Read"))

        assert habit.name == "Read"
        assert habit.completed_today is False
        assert habit.history == []

    def test_name_is_trimmed(self, store):
        habit = store.get(store.add_habit("  Stretch \t"))
        assert habit.name == "Stretch"

    @pytest.mark.parametrize("name", ["", "   ", "\n\t", None])
    def test_blank_name_is_ignored(self, store, name):
        assert store.add_habit(name) is None
        assert len(store) == 0

    def test_ids_increase_in_insertion_order(self, store):
        ids = [store.add_habit(name) for name in ("A", "B", "C")]

        assert ids == [1, 2, 3]
        assert [h.name for h in store.habits] == ["A", "B", "C"]

    def test_ids_are_not_reused_after_delete(self, store):
        first = store.add_habit("A")
        store.delete_habit(first)

        assert store.add_habit("B") == 2

    def test_ids_stay_unique_with_interleaved_deletes(self, store):
        seen = []
        for round_ in range(5):
            seen.append(store.add_habit(f"H{round_}"))
            if round_ % 2 == 0:
                store.delete_habit(seen[-1])

        assert seen == sorted(seen)
        assert len(set(seen)) == len(seen)

    def test_id_follows_max_existing(self, store):
        store.add_habit("A")
        store.add_habit("B")
        store.add_habit("C")
        store.delete_habit(2)

        assert store.add_habit("D") == 4


class TestRenameHabit:
    """Renaming habits in place."""

    def test_rename_keeps_id_and_history(self, store, habit_factory):
        habit = habit_factory("Read")
        store.toggle_habit(habit.id, TODAY)

        assert store.rename_habit(habit.id, "  Read 20 pages ") is True

        assert habit.name == "Read 20 pages"
        assert habit.completed_today is True
        assert habit.history == [CompletionEntry(TODAY, True)]

    def test_whitespace_rename_is_noop(self, store, habit_factory):
        habit = habit_factory("Read")

        assert store.rename_habit(habit.id, "    ") is False
        assert habit.name == "Read"

    def test_unknown_id_is_noop(self, store, habit_factory):
        habit_factory("Read")

        assert store.rename_habit(99, "Write") is False
        assert [h.name for h in store.habits] == ["Read"]


class TestDeleteHabit:
    """Removing habits."""

    def test_delete_removes_only_target(self, store):
        store.add_habit("A")
        store.add_habit("B")

        assert store.delete_habit(1) is True
        assert [h.id for h in store.habits] == [2]
        assert store.get(1) is None

    def test_delete_unknown_is_noop(self, store):
        store.add_habit("A")

        assert store.delete_habit(42) is False
        assert len(store) == 1


class TestToggleHabit:
    """Toggling today's completion."""

    def test_toggle_marks_done_and_records_today(self, store, habit_factory):
        habit = habit_factory()

        assert store.toggle_habit(habit.id, TODAY) is True
        assert habit.completed_today is True
        assert was_completed_on(habit, TODAY) is True

    def test_double_toggle_restores_flag_with_single_entry(self, store, habit_factory):
        habit = habit_factory()

        store.toggle_habit(habit.id, TODAY)
        assert store.toggle_habit(habit.id, TODAY) is False

        assert habit.completed_today is False
        assert habit.history == [CompletionEntry(TODAY, False)]

    def test_toggle_on_new_day_appends_entry(self, store, habit_factory):
        habit = habit_factory()
        store.toggle_habit(habit.id, "2024-06-09")
        store.toggle_habit(habit.id, TODAY)

        assert [e.date for e in habit.history] == ["2024-06-09", TODAY]
        assert len({e.date for e in habit.history}) == len(habit.history)

    def test_toggle_unknown_id_is_noop(self, store, habit_factory):
        habit = habit_factory()

        assert store.toggle_habit(habit.id + 1, TODAY) is None
        assert habit.history == []

    def test_toggle_does_not_touch_other_habits(self, store):
        first = store.get(store.add_habit("A"))
        second = store.get(store.add_habit("B"))

        store.toggle_habit(first.id, TODAY)

        assert second.completed_today is False
        assert second.history == []

    def test_toggle_reads_history_not_cached_flag(self, store, habit_factory):
        """A stale flag must not make the next toggle a no-op."""
        habit = habit_factory()
        store.toggle_habit(habit.id, TODAY)
        habit.completed_today = False

        # Today's entry still says done, so the next toggle undoes it.
        assert store.toggle_habit(habit.id, TODAY) is False
        assert habit.history == [CompletionEntry(TODAY, False)]


class TestWasCompletedOn:
    def test_missing_date_is_not_completed(self, habit_factory):
        habit = habit_factory()
        assert was_completed_on(habit, "2024-01-01") is False

    def test_reads_recorded_value(self, habit_factory):
        habit = habit_factory()
        habit.history.append(CompletionEntry("2024-01-01", True))
        habit.history.append(CompletionEntry("2024-01-02", False))

        assert was_completed_on(habit, "2024-01-01") is True
        assert was_completed_on(habit, "2024-01-02") is False


def test_sync_completed_today_keeps_history(store):
    for name in ("A", "B", "C"):
        store.add_habit(name)
    store.toggle_habit(1, TODAY)
    store.toggle_habit(3, TODAY)

    assert store.sync_completed_today("2024-06-11") == 2
    assert all(not h.completed_today for h in store.habits)
    assert was_completed_on(store.get(1), TODAY) is True

    # Going back to a day with entries restores the flags from history.
    assert store.sync_completed_today(TODAY) == 2
    assert [h.completed_today for h in store.habits] == [True, False, True]


def test_habits_view_is_read_only(store):
    store.add_habit("A")

    view = store.habits
    assert isinstance(view, tuple)
    with pytest.raises(AttributeError):
        view.append("B")  # type: ignore[attr-defined]


class TestSnapshot:
    """Snapshot records and restoring from them."""

    def test_snapshot_omits_completed_today(self, store, habit_factory):
        habit = habit_factory("Read")
        store.toggle_habit(habit.id, TODAY)

        assert store.snapshot() == [
            {"id": 1, "name": "Read", "history": [{"date": TODAY, "completed": True}]}
        ]

    def test_restore_derives_completed_today(self):
        records = [
            {"id": 3, "name": "Read", "history": [{"date": TODAY, "completed": True}]},
            {"id": 7, "name": "Walk", "history": [{"date": "2024-06-09", "completed": True}]},
        ]

        restored = HabitStore.from_snapshot(records, TODAY)

        assert [h.id for h in restored.habits] == [3, 7]
        assert restored.get(3).completed_today is True
        assert restored.get(7).completed_today is False

    def test_restore_continues_id_sequence(self):
        restored = HabitStore.from_snapshot([{"id": 5, "name": "Read"}], TODAY)
        assert restored.add_habit("Walk") == 6

    def test_restore_collapses_duplicate_dates(self):
        records = [
            {
                "id": 1,
                "name": "Read",
                "history": [
                    {"date": TODAY, "completed": True},
                    {"date": TODAY, "completed": False},
                ],
            }
        ]

        habit = HabitStore.from_snapshot(records, TODAY).get(1)
        assert habit.history == [CompletionEntry(TODAY, False)]

    @pytest.mark.parametrize(
        "records",
        [
            [{"name": "Read"}],
            [{"id": 1, "name": "   "}],
            [{"id": 1, "name": "A"}, {"id": 1, "name": "B"}],
            [{"id": 1, "name": "A", "history": [{"date": "June 10", "completed": True}]}],
            [{"id": 1, "name": "A", "history": [{"completed": True}]}],
            [{"id": 1, "name": 5}],
            [{"id": 1, "name": None}],
            [{"id": 1, "name": "A", "history": [{"date": "20240610", "completed": True}]}],
            [{"id": 1, "name": "A", "history": [{"date": "2024-W24-1", "completed": True}]}],
            [{"id": 1, "name": "A", "history": [{"date": 20240610, "completed": True}]}],
            [{"id": 1, "name": "A", "history": [{"date": TODAY, "completed": "false"}]}],
            [{"id": 1, "name": "A", "history": [{"date": TODAY, "completed": 1}]}],
        ],
    )
    def test_restore_rejects_malformed_records(self, records):
        with pytest.raises(ValueError):
            HabitStore.from_snapshot(records, TODAY)

    def test_restore_rejects_mixed_date_spellings(self):
        """Two spellings of one day would otherwise survive as two entries."""
        records = [
            {
                "id": 1,
                "name": "Read",
                "history": [
                    {"date": "20240610", "completed": True},
                    {"date": TODAY, "completed": False},
                ],
            }
        ]

        with pytest.raises(ValueError, match="YYYY-MM-DD"):
            HabitStore.from_snapshot(records, TODAY)

    def test_restored_history_feeds_aggregation(self):
        records = [
            {
                "id": 1,
                "name": "Read",
                "history": [
                    {"date": "2024-06-01", "completed": True},
                    {"date": TODAY, "completed": True},
                ],
            }
        ]

        habit = HabitStore.from_snapshot(records, TODAY).get(1)

        assert habit.completed_today is True
        assert monthly_completion(habit, 2024, 5, TODAY) == pytest.approx(20.0)
