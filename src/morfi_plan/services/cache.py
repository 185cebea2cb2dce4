"""Local key-value cache used as the offline mirror of the document."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

DOCUMENT_KEY = "morfi-data"
BIN_ID_KEY = "morfi-bin-id"

_logger = logging.getLogger(__name__)


class LocalCache(Protocol):
    """Synchronous key-value storage for JSON-compatible values."""

    def get(self, key: str) -> object | None:
        """Return the stored value, if present."""

    def set(self, key: str, value: object) -> None:
        """Store a value under a key."""

    def delete(self, key: str) -> None:
        """Remove a key if present."""


@dataclass
class InMemoryLocalCache(LocalCache):
    """Process-local cache; contents are lost on restart."""

    _entries: dict[str, object]

    def __init__(self) -> None:
        self._entries = {}

    def get(self, key: str) -> object | None:
        return self._entries.get(key)

    def set(self, key: str, value: object) -> None:
        self._entries[key] = value

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)


@dataclass
class JsonFileLocalCache(LocalCache):
    """Cache persisted as a single JSON object on disk."""

    path: Path

    def get(self, key: str) -> object | None:
        """Return a stored value, treating an unreadable file as empty."""
        return self._load().get(key)

    def set(self, key: str, value: object) -> None:
        """Store a value and rewrite the file."""
        entries = self._load()
        entries[key] = value
        self._save(entries)

    def delete(self, key: str) -> None:
        """Remove a key and rewrite the file."""
        entries = self._load()
        if entries.pop(key, None) is not None:
            self._save(entries)

    def _load(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            _logger.warning("Ignoring unreadable local cache at %s", self.path)
            return {}
        return payload if isinstance(payload, dict) else {}

    def _save(self, entries: dict[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(entries, ensure_ascii=False), encoding="utf-8")
