"""Food diary with undoable edits.

Key components:
- LogEntry: a logged food with a calorie snapshot
- DiaryStore: per-date ordered entries and totals
- AddEntryCommand / DeleteEntryCommand: reversible mutations
- UndoHistory: LIFO stack of executed commands
"""

from __future__ import annotations

from dietassist.diary.commands import (
    SERVINGS_TOLERANCE,
    AddEntryCommand,
    Command,
    DeleteEntryCommand,
    UndoHistory,
)
from dietassist.diary.models import LogEntry
from dietassist.diary.store import DiaryStore

__all__ = [
    "SERVINGS_TOLERANCE",
    "AddEntryCommand",
    "Command",
    "DeleteEntryCommand",
    "DiaryStore",
    "LogEntry",
    "UndoHistory",
]
