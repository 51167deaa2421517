"""Process-local JSON key/value store."""

from __future__ import annotations

import json
import os
from pathlib import Path
import tempfile
from typing import Any

from .customerlogging import logger


class JsonFileStore:
    """Synchronous key/value store backed by a JSON file."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        """Init JsonFileStore."""
        self.path = Path(path)
        self._data: dict[str, Any] = self._load()

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            logger.warning("Ignoring unreadable store file %s", self.path)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring malformed store file %s", self.path)
            return {}
        return data

    def get(self, key: str, default: Any = None) -> Any:
        """Return the stored value or default."""
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Store a value and write the file."""
        self._data[key] = value
        self._write()

    def _write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


def default_store_path() -> Path:
    """Return the per-user store location."""
    base = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(base) / "smartlife" / "config.json"
