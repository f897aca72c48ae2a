"""Data models for the food diary."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class LogEntry:
    """A single food diary entry.

    calories is a snapshot taken when the entry was created and does not
    follow later edits to the food's definition.
    """

    food_name: str
    servings: float
    calories: float

    def to_dict(self) -> dict[str, Any]:
        """Convert to the persisted log-entry format."""
        return {
            "food": self.food_name,
            "servings": self.servings,
            "calories": self.calories,
        }
