"""JSON file persistence."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from dietassist.errors import StorageError

logger = logging.getLogger(__name__)


class JsonFileStore:
    """Reads and writes a single JSON document on disk."""

    def __init__(self, path: Path, indent: int = 4):
        """Initialize the store.

        Args:
            path: Path to the JSON file
            indent: Indentation used when writing
        """
        self.path = Path(path)
        self.indent = indent

    def exists(self) -> bool:
        return self.path.exists()

    def read(self) -> Any:
        """Parse and return the file contents, or None if it does not exist.

        Raises:
            StorageError: If the file cannot be read or is not valid JSON
        """
        if not self.path.exists():
            logger.info("No existing file at %s", self.path)
            return None
        try:
            with open(self.path, encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as exc:
            raise StorageError(f"Invalid JSON in {self.path}: {exc}") from exc
        except OSError as exc:
            raise StorageError(f"Unable to read {self.path}: {exc}") from exc

    def write(self, data: Any) -> None:
        """Write data atomically, creating parent directories as needed.

        Raises:
            StorageError: If the file cannot be written
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=self.indent)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except (OSError, TypeError, ValueError) as exc:
            raise StorageError(f"Unable to write {self.path}: {exc}") from exc
        logger.debug("Saved %s", self.path)
