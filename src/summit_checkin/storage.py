"""Durable key-value storage for the check-in snapshot.

``JsonFileStorage`` is the terminal counterpart of the browser's
``localStorage``: a single JSON object on disk whose values are strings.
``StatePersistence`` binds a storage backend and a fixed key to the codec
and keeps every I/O failure on this side of the boundary.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Protocol, Union

from .codec import decode, encode
from .logger import get_logger
from .models import CheckInState

STORAGE_KEY = "intel-summit-checkin-state"

log = get_logger("storage")


class KeyValueStorage(Protocol):
    """String-keyed store holding string values."""

    def get_item(self, key: str) -> Optional[str]:
        """Return the stored value or ``None`` when the key is absent."""

    def set_item(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``; may raise ``OSError``."""

    def remove_item(self, key: str) -> None:
        """Drop ``key`` if present."""


class MemoryStorage:
    """Dict-backed storage used for ephemeral sessions and tests."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileStorage:
    """Keep all keys in one JSON file; unreadable files read as empty."""

    def __init__(self, path: Union[Path, str]) -> None:
        self.path = Path(path)

    def _load_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            log.debug("Unable to read %s: %s", self.path, exc)
            return {}
        if not isinstance(payload, dict):
            return {}
        return {str(k): v for k, v in payload.items() if isinstance(v, str)}

    def _save_all(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, indent=2, ensure_ascii=False)
            tmp_path.replace(self.path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise

    def get_item(self, key: str) -> Optional[str]:
        return self._load_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._load_all()
        data[key] = value
        self._save_all(data)

    def remove_item(self, key: str) -> None:
        data = self._load_all()
        if data.pop(key, None) is None:
            return
        if data:
            self._save_all(data)
        else:
            self.path.unlink(missing_ok=True)


class StatePersistence:
    """Load and save ``CheckInState`` snapshots under a fixed key."""

    def __init__(self, storage: KeyValueStorage, key: str = STORAGE_KEY) -> None:
        self.storage = storage
        self.key = key

    def load(self) -> Optional[CheckInState]:
        try:
            raw = self.storage.get_item(self.key)
        except (OSError, ValueError) as exc:
            log.debug("Check-in storage unavailable: %s", exc)
            return None
        if raw is None:
            return None
        state = decode(raw)
        if state is None:
            log.debug("Stored check-in snapshot under '%s' is unusable; starting fresh", self.key)
        return state

    def save(self, state: CheckInState) -> bool:
        """Persist ``state``; returns ``False`` when the write did not happen."""
        try:
            self.storage.set_item(self.key, encode(state))
        except (OSError, TypeError, ValueError) as exc:
            log.debug("Failed to persist check-in state: %s", exc)
            return False
        return True

    def export(self, state: CheckInState, path: Union[Path, str]) -> Path:
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(encode(state), encoding="utf-8")
        return target

    def clear(self) -> None:
        try:
            self.storage.remove_item(self.key)
        except OSError as exc:
            log.debug("Failed to clear check-in state: %s", exc)


__all__ = [
    "STORAGE_KEY",
    "KeyValueStorage",
    "MemoryStorage",
    "JsonFileStorage",
    "StatePersistence",
]
