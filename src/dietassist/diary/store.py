"""Per-date food diary.

Entries are kept in insertion order for each date. A date with no entries
is removed from the mapping, so no empty lists are ever stored or saved.
"""

from __future__ import annotations

import logging
import math
from numbers import Real
from typing import Any, Optional

from dietassist.diary.dates import is_valid_date, validate_date
from dietassist.diary.models import LogEntry
from dietassist.errors import EntryIndexError, MalformedDiaryError
from dietassist.foods.catalog import FoodCatalog
from dietassist.foods.models import check_servings

logger = logging.getLogger(__name__)


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def _parse_entry(date: str, raw: Any) -> LogEntry:
    if not isinstance(raw, dict):
        raise MalformedDiaryError(f"Entry for {date} is not an object")
    food = raw.get("food")
    servings = raw.get("servings")
    calories = raw.get("calories")
    if not isinstance(food, str) or not food:
        raise MalformedDiaryError(f"Entry for {date} has no food name")
    if not _is_number(servings) or servings <= 0:
        raise MalformedDiaryError(f"Entry '{food}' on {date} has invalid servings")
    if not _is_number(calories):
        raise MalformedDiaryError(f"Entry '{food}' on {date} has invalid calories")
    return LogEntry(food, float(servings), float(calories))


class DiaryStore:
    """Mapping from date to the ordered food entries logged on that date."""

    def __init__(self, catalog: FoodCatalog):
        """Initialize an empty diary.

        Args:
            catalog: Catalog used to look up foods when entries are added
        """
        self.catalog = catalog
        self._logs: dict[str, list[LogEntry]] = {}

    def __contains__(self, date: object) -> bool:
        return date in self._logs

    def dates(self) -> list[str]:
        """Dates with at least one entry, in ascending order."""
        return sorted(self._logs)

    def entries(self, date: str) -> list[LogEntry]:
        """Return a copy of the entries for date (empty if none)."""
        return list(self._logs.get(date, ()))

    def add_entry(self, date: str, food_name: str, servings: float) -> LogEntry:
        """Log servings of a catalog food on date.

        Calories are looked up now and stored with the entry.

        Raises:
            InvalidDateError: If date is not YYYY-MM-DD
            FoodNotFoundError: If the food is not in the catalog
            ValueError: If servings is not a positive number
        """
        validate_date(date)
        servings = check_servings(servings)
        food = self.catalog.get(food_name)

        entry = LogEntry(food_name, servings, food.calories * servings)
        self.append_entry(date, entry)
        return entry

    def append_entry(self, date: str, entry: LogEntry) -> None:
        """Append an already-built entry to the end of date's list."""
        self._logs.setdefault(date, []).append(entry)
        logger.debug("Logged %s x%g on %s", entry.food_name, entry.servings, date)

    def delete_entry(self, date: str, index: int) -> LogEntry:
        """Remove and return the entry at index on date.

        Raises:
            EntryIndexError: If date has no entry at index
        """
        entries = self._logs.get(date)
        if entries is None or not 0 <= index < len(entries):
            raise EntryIndexError(date, index)

        removed = entries.pop(index)
        self._drop_if_empty(date)
        return removed

    def remove_latest_match(
        self,
        date: str,
        food_name: str,
        servings: float,
        tolerance: float,
    ) -> Optional[LogEntry]:
        """Remove the most recent entry for food_name with matching servings.

        Returns:
            The removed entry, or None if nothing matched
        """
        entries = self._logs.get(date)
        if not entries:
            return None

        for index in range(len(entries) - 1, -1, -1):
            entry = entries[index]
            if entry.food_name == food_name and abs(entry.servings - servings) < tolerance:
                del entries[index]
                self._drop_if_empty(date)
                return entry
        return None

    def total_calories(self, date: str) -> float:
        """Sum of snapshotted calories for date; 0.0 if nothing is logged."""
        return sum(entry.calories for entry in self._logs.get(date, ()))

    def load(self, data: Any) -> int:
        """Replace the diary with persisted data.

        Args:
            data: Mapping of date to a list of {food, servings, calories}

        Returns:
            Number of dates loaded

        Raises:
            MalformedDiaryError: If the data is structurally invalid. The
                current diary is left unchanged.
        """
        if not isinstance(data, dict):
            raise MalformedDiaryError("Food log must be a mapping of dates to entries")

        logs: dict[str, list[LogEntry]] = {}
        for date, raw_entries in data.items():
            if not is_valid_date(date):
                raise MalformedDiaryError(f"Invalid date key {date!r}")
            if not isinstance(raw_entries, list):
                raise MalformedDiaryError(f"Entries for {date} must be a list")
            entries = [_parse_entry(date, raw) for raw in raw_entries]
            if entries:
                logs[date] = entries

        self._logs = logs
        logger.info("Loaded food logs for %d days", len(logs))
        return len(logs)

    def save(self) -> dict[str, list[dict[str, Any]]]:
        """Serialize the diary, dates in ascending order."""
        return {
            date: [entry.to_dict() for entry in self._logs[date]]
            for date in self.dates()
        }

    def _drop_if_empty(self, date: str) -> None:
        if not self._logs.get(date):
            self._logs.pop(date, None)
