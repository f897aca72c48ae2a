"""Tests for undoable diary commands and the undo history."""

from __future__ import annotations

import pytest

from dietassist.diary.commands import (
    AddEntryCommand,
    CommandState,
    DeleteEntryCommand,
)
from dietassist.errors import EntryIndexError, FoodNotFoundError, NothingToUndoError

DAY = "2024-01-01"


class TestAddEntryCommand:
    """Tests for AddEntryCommand."""

    def test_add_then_undo_restores_empty_diary(self, diary, history):
        history.run(AddEntryCommand(diary, DAY, "Apple", 2))
        assert diary.total_calories(DAY) == 190

        history.undo()

        assert DAY not in diary
        assert diary.save() == {}

    def test_undo_removes_matching_entry_after_other_changes(self, diary, history):
        diary.add_entry(DAY, "Rice", 1)
        command = AddEntryCommand(diary, DAY, "Apple", 1)
        history.run(command)
        diary.add_entry(DAY, "Greek Yogurt", 1)

        command.undo()

        assert [e.food_name for e in diary.entries(DAY)] == ["Rice", "Greek Yogurt"]

    def test_undo_with_identical_entries_removes_most_recent(self, diary):
        diary.add_entry(DAY, "Apple", 1)
        diary.add_entry(DAY, "Rice", 1)
        command = AddEntryCommand(diary, DAY, "Apple", 1)
        command.execute()

        command.undo()

        assert [e.food_name for e in diary.entries(DAY)] == ["Apple", "Rice"]

    def test_undo_when_entry_already_gone_is_harmless(self, diary):
        command = AddEntryCommand(diary, DAY, "Apple", 1)
        command.execute()
        diary.delete_entry(DAY, 0)

        command.undo()

        assert DAY not in diary
        assert command.state is CommandState.UNDONE

    def test_execute_unknown_food_is_not_recorded(self, diary, history):
        with pytest.raises(FoodNotFoundError):
            history.run(AddEntryCommand(diary, DAY, "Dragonfruit", 1))
        assert len(history) == 0
        assert DAY not in diary

    def test_describe(self, diary):
        command = AddEntryCommand(diary, DAY, "Apple", 2)
        command.execute()
        assert command.describe() == "Add 2 serving(s) of Apple (190 calories) on 2024-01-01"

    def test_execute_twice_rejected(self, diary):
        command = AddEntryCommand(diary, DAY, "Apple", 1)
        command.execute()
        with pytest.raises(RuntimeError):
            command.execute()
        assert len(diary.entries(DAY)) == 1

    def test_undo_before_execute_rejected(self, diary):
        with pytest.raises(RuntimeError):
            AddEntryCommand(diary, DAY, "Apple", 1).undo()


class TestDeleteEntryCommand:
    """Tests for DeleteEntryCommand."""

    def test_delete_then_undo_restores_content_and_total(self, diary, history):
        diary.add_entry(DAY, "Apple", 1)
        diary.add_entry(DAY, "Rice", 2)
        before_total = diary.total_calories(DAY)
        before_entries = diary.entries(DAY)

        history.run(DeleteEntryCommand(diary, DAY, 0))
        assert diary.total_calories(DAY) == 400

        history.undo()

        assert diary.total_calories(DAY) == pytest.approx(before_total)
        assert sorted(diary.entries(DAY), key=lambda e: e.food_name) == before_entries
        # Restored at the end, not at its old position
        assert [e.food_name for e in diary.entries(DAY)] == ["Rice", "Apple"]

    def test_delete_only_entry_then_undo_recreates_date(self, diary, history):
        diary.add_entry(DAY, "Apple", 1)
        history.run(DeleteEntryCommand(diary, DAY, 0))
        assert DAY not in diary

        history.undo()

        assert diary.entries(DAY)[0].food_name == "Apple"

    def test_captures_entry_verbatim(self, diary, catalog):
        diary.add_entry(DAY, "Rice", 1)
        catalog.set_calories("Rice", 1)
        command = DeleteEntryCommand(diary, DAY, 0)
        command.execute()
        command.undo()
        assert diary.total_calories(DAY) == 200

    def test_invalid_index_rejected_at_creation(self, diary):
        diary.add_entry(DAY, "Apple", 1)
        with pytest.raises(EntryIndexError):
            DeleteEntryCommand(diary, DAY, 3)

    def test_describe(self, diary):
        diary.add_entry(DAY, "Apple", 1.5)
        command = DeleteEntryCommand(diary, DAY, 0)
        assert command.describe() == "Delete 1.5 serving(s) of Apple from 2024-01-01"


class TestUndoHistory:
    """Tests for UndoHistory ordering."""

    def test_empty_history(self, history):
        assert not history
        with pytest.raises(NothingToUndoError):
            history.undo()

    def test_last_in_first_out(self, diary, history):
        history.run(AddEntryCommand(diary, DAY, "Apple", 1))
        history.run(AddEntryCommand(diary, DAY, "Rice", 1))
        history.run(DeleteEntryCommand(diary, DAY, 0))
        assert [e.food_name for e in diary.entries(DAY)] == ["Rice"]

        undone = history.undo()
        assert isinstance(undone, DeleteEntryCommand)
        assert [e.food_name for e in diary.entries(DAY)] == ["Rice", "Apple"]

        undone = history.undo()
        assert undone.food_name == "Rice"
        assert [e.food_name for e in diary.entries(DAY)] == ["Apple"]

        history.undo()
        assert DAY not in diary
        assert len(history) == 0

    def test_descriptions_most_recent_first(self, diary, history):
        history.run(AddEntryCommand(diary, DAY, "Apple", 1))
        history.run(AddEntryCommand(diary, DAY, "Rice", 2))
        descriptions = history.descriptions()
        assert descriptions[0].startswith("Add 2 serving(s) of Rice")
        assert descriptions[1].startswith("Add 1 serving(s) of Apple")

    def test_undone_command_is_discarded(self, diary, history):
        history.run(AddEntryCommand(diary, DAY, "Apple", 1))
        history.undo()
        with pytest.raises(NothingToUndoError):
            history.undo()
