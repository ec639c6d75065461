"""Local JSON file implementation of the state store."""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from calorie_tracker.services.session import StateStore

logger = logging.getLogger(__name__)


@dataclass
class JsonFileStore(StateStore):
    """Keeps string values in a single JSON object on disk."""

    path: Path

    def get(self, key: str) -> str | None:
        """Return the stored value for a key, if present."""
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        """Store a value and rewrite the file."""
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        """Remove a key and rewrite the file when it was present."""
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)

    def _read(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError):
            data = None
        if not isinstance(data, dict):
            logger.warning("State file %s is unreadable; clearing it", self.path)
            self._write({})
            return {}
        return data

    def _write(self, data: dict[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        tmp_path.write_text(json.dumps(data), encoding="utf-8")
        os.replace(tmp_path, self.path)
