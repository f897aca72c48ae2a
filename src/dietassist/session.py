"""A working session: catalog, diary, undo history and profile, wired together.

The session owns every component and hands them to each other explicitly.
Nothing is kept in module-level state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from dietassist.config.settings import Settings
from dietassist.diary.commands import AddEntryCommand, DeleteEntryCommand, UndoHistory
from dietassist.diary.models import LogEntry
from dietassist.diary.store import DiaryStore
from dietassist.foods.catalog import FoodCatalog, ResolutionWarning
from dietassist.profiles.body_calc import (
    ActivityLevel,
    CalorieCalculationMethod,
    Gender,
)
from dietassist.profiles.manager import ProfileManager
from dietassist.profiles.models import DailyProfile, UserProfile
from dietassist.storage.json_store import JsonFileStore

logger = logging.getLogger(__name__)


def default_profile(settings: Settings) -> UserProfile:
    """Build the starting profile from configured defaults."""
    defaults = settings.profile_defaults
    return UserProfile(
        gender=Gender(defaults.gender),
        height_cm=defaults.height_cm,
        age=defaults.age,
        calculation_method=CalorieCalculationMethod(defaults.calculation_method),
        default_daily=DailyProfile(
            weight_kg=defaults.weight_kg,
            activity_level=ActivityLevel(defaults.activity_level),
        ),
    )


@dataclass
class DietSession:
    """Catalog, diary and profile backed by JSON files."""

    food_store: JsonFileStore
    log_store: JsonFileStore
    profile_store: JsonFileStore
    catalog: FoodCatalog = field(default_factory=FoodCatalog)
    history: UndoHistory = field(default_factory=UndoHistory)
    diary: DiaryStore = field(init=False)
    profiles: ProfileManager = field(init=False)
    warnings: list[ResolutionWarning] = field(default_factory=list)
    base_profile: Optional[UserProfile] = None

    def __post_init__(self) -> None:
        self.diary = DiaryStore(self.catalog)
        self.profiles = ProfileManager(self.diary, self.base_profile)

    @classmethod
    def from_settings(cls, settings: Settings) -> "DietSession":
        """Create a session for the files named in settings (not yet loaded)."""
        storage = settings.storage
        return cls(
            food_store=JsonFileStore(storage.food_database_path),
            log_store=JsonFileStore(storage.food_log_path),
            profile_store=JsonFileStore(storage.profile_path, indent=2),
            base_profile=default_profile(settings),
        )

    def load(self) -> "DietSession":
        """Load the food database, food log and profile from disk.

        Missing files leave the corresponding component empty. Any
        DietAssistError from a malformed file propagates to the caller.
        """
        food_data = self.food_store.read()
        if food_data is not None:
            _, self.warnings = self.catalog.load(food_data)

        log_data = self.log_store.read()
        if log_data is not None:
            self.diary.load(log_data)

        profile_data = self.profile_store.read()
        if profile_data is not None:
            self.profiles.load(profile_data)
        return self

    def save(self) -> None:
        """Write the food log and profile to disk, and the food database if it changed.

        An unchanged database is not rewritten, so components skipped while
        loading stay in the file.
        """
        if self.catalog.modified:
            self.food_store.write(self.catalog.save())
        self.log_store.write(self.diary.save())
        self.profile_store.write(self.profiles.save())
        logger.info("Session saved")

    def add_entry(self, date: str, food_name: str, servings: float) -> AddEntryCommand:
        """Log a food through the undo history."""
        command = AddEntryCommand(self.diary, date, food_name, servings)
        self.history.run(command)
        return command

    def delete_entry(self, date: str, index: int) -> LogEntry:
        """Delete an entry through the undo history and return it."""
        command = DeleteEntryCommand(self.diary, date, index)
        self.history.run(command)
        return command.deleted_entry

    def undo(self) -> str:
        """Undo the most recent change; returns its description."""
        return self.history.undo().describe()
