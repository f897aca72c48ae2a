"""Undoable diary mutations.

Every change to the diary made during a session goes through a Command so
it can be reversed. Commands keep copies of the values they need to undo
themselves instead of positions into the diary, since other commands may
have changed the diary in between.

There is no redo: an undone command is discarded.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

from dietassist.diary.models import LogEntry
from dietassist.diary.store import DiaryStore
from dietassist.errors import EntryIndexError, NothingToUndoError

logger = logging.getLogger(__name__)

# Servings read back from JSON or typed by the user rarely compare equal.
SERVINGS_TOLERANCE = 1e-3


class CommandState(Enum):
    CREATED = "created"
    EXECUTED = "executed"
    UNDONE = "undone"


class Command(ABC):
    """A reversible diary mutation."""

    def __init__(self, diary: DiaryStore, date: str):
        self.diary = diary
        self.date = date
        self.state = CommandState.CREATED

    def execute(self) -> None:
        """Apply the change. Must be called exactly once."""
        if self.state is not CommandState.CREATED:
            raise RuntimeError(f"Command already {self.state.value}: {self.describe()}")
        self._execute()
        self.state = CommandState.EXECUTED

    def undo(self) -> None:
        """Reverse the change made by execute()."""
        if self.state is not CommandState.EXECUTED:
            raise RuntimeError(f"Cannot undo a command that is {self.state.value}")
        self._undo()
        self.state = CommandState.UNDONE

    @abstractmethod
    def _execute(self) -> None: ...

    @abstractmethod
    def _undo(self) -> None: ...

    @abstractmethod
    def describe(self) -> str:
        """One-line human-readable description."""


class AddEntryCommand(Command):
    """Log servings of a food on a date."""

    def __init__(self, diary: DiaryStore, date: str, food_name: str, servings: float):
        super().__init__(diary, date)
        self.food_name = food_name
        self.servings = float(servings)
        self.calories: Optional[float] = None

    def _execute(self) -> None:
        entry = self.diary.add_entry(self.date, self.food_name, self.servings)
        self.calories = entry.calories

    def _undo(self) -> None:
        removed = self.diary.remove_latest_match(
            self.date, self.food_name, self.servings, SERVINGS_TOLERANCE
        )
        if removed is None:
            logger.warning(
                "No entry for %s (%g servings) left on %s to undo",
                self.food_name,
                self.servings,
                self.date,
            )

    def describe(self) -> str:
        calories = f" ({self.calories:g} calories)" if self.calories is not None else ""
        return (
            f"Add {self.servings:g} serving(s) of {self.food_name}"
            f"{calories} on {self.date}"
        )


class DeleteEntryCommand(Command):
    """Remove the entry at a position on a date."""

    def __init__(self, diary: DiaryStore, date: str, index: int):
        super().__init__(diary, date)
        entries = diary.entries(date)
        if not 0 <= index < len(entries):
            raise EntryIndexError(date, index)
        self.index = index
        self.deleted_entry: LogEntry = entries[index]

    def _execute(self) -> None:
        self.deleted_entry = self.diary.delete_entry(self.date, self.index)

    def _undo(self) -> None:
        # Restores the content at the end of the day, not the old position.
        self.diary.append_entry(self.date, self.deleted_entry)

    def describe(self) -> str:
        return (
            f"Delete {self.deleted_entry.servings:g} serving(s) of "
            f"{self.deleted_entry.food_name} from {self.date}"
        )


class UndoHistory:
    """Last-in, first-out stack of executed commands."""

    def __init__(self) -> None:
        self._stack: list[Command] = []

    def __len__(self) -> int:
        return len(self._stack)

    def __bool__(self) -> bool:
        return bool(self._stack)

    def run(self, command: Command) -> Command:
        """Execute command and push it onto the history.

        A command whose execute() raises is not recorded.
        """
        command.execute()
        self._stack.append(command)
        logger.debug("Executed: %s", command.describe())
        return command

    def undo(self) -> Command:
        """Undo the most recent command and return it.

        Raises:
            NothingToUndoError: If the history is empty
        """
        if not self._stack:
            raise NothingToUndoError()
        command = self._stack.pop()
        command.undo()
        logger.info("Undone: %s", command.describe())
        return command

    def descriptions(self) -> list[str]:
        """Descriptions of undoable commands, most recent first."""
        return [command.describe() for command in reversed(self._stack)]

    def clear(self) -> None:
        self._stack.clear()
