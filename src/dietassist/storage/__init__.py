"""File persistence for the food database, food log and profile."""

from __future__ import annotations

from dietassist.storage.json_store import JsonFileStore

__all__ = ["JsonFileStore"]
