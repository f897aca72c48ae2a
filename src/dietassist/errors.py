"""Exception hierarchy for catalog, diary and profile operations.

Every error raised by the library derives from DietAssistError so the CLI
can report it and carry on. None of these are fatal to the process.
"""

from __future__ import annotations


class DietAssistError(Exception):
    """Base class for all diet assistant errors."""


class DuplicateFoodError(DietAssistError):
    """A food with the same name already exists in the catalog."""

    def __init__(self, name: str):
        super().__init__(f"A food with name '{name}' already exists")
        self.name = name


class FoodNotFoundError(DietAssistError, KeyError):
    """No food with the requested name exists in the catalog."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Food not found: {self.name}"


class EntryIndexError(DietAssistError, IndexError):
    """A diary position does not exist for the given date."""

    def __init__(self, date: str, index: int):
        super().__init__(f"Invalid food entry index {index} for {date}")
        self.date = date
        self.index = index


class InvalidDateError(DietAssistError, ValueError):
    """A date string is not a valid YYYY-MM-DD calendar date."""

    def __init__(self, value: str):
        super().__init__(f"Invalid date '{value}'. Please use YYYY-MM-DD.")
        self.value = value


class NothingToUndoError(DietAssistError):
    """The undo history is empty."""

    def __init__(self) -> None:
        super().__init__("Nothing to undo")


class StorageError(DietAssistError):
    """Reading or writing a persisted file failed."""


class MalformedPersistentStateError(DietAssistError):
    """Persisted data is structurally invalid.

    Loaders raise this before touching in-memory state, so the previous
    state survives a failed load.
    """


class MalformedCatalogError(MalformedPersistentStateError):
    """The food database is structurally invalid."""


class MalformedDiaryError(MalformedPersistentStateError):
    """The food log is structurally invalid."""


class MalformedProfileError(MalformedPersistentStateError):
    """The user profile file is structurally invalid."""
