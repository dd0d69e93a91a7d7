"""Persisted key/value storage for the client session."""

import json
import logging
import os
import tempfile
from typing import Any, Dict, Optional

from healthwire.config import settings

logger = logging.getLogger(__name__)


class MemoryStorage:
    """Process-local storage. Nothing survives a restart."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self):
        return list(self._items.keys())

    def get_json(self, key: str) -> Any:
        return get_json(self, key)

    def set_json(self, key: str, value: Any) -> None:
        set_json(self, key, value)


class JsonFileStorage(MemoryStorage):
    """Storage backed by a single JSON file, rewritten on every change."""

    def __init__(self, path: Optional[str] = None):
        self.path = path or settings.STORAGE_PATH
        super().__init__(self._load())

    def _load(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read session storage at {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed session storage at {self.path}")
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _flush(self) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)

        # Write to a sibling temp file so a crash never leaves half a file behind
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".session-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self._items, f)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def _try_flush(self, action: str, key: str) -> None:
        # The in-memory copy stays authoritative for this process when the file cannot be written
        try:
            self._flush()
        except OSError as e:
            logger.error(f"Error {action} item '{key}' in storage at {self.path}: {e}")

    def set_item(self, key: str, value: str) -> None:
        super().set_item(key, value)
        self._try_flush("setting", key)

    def remove_item(self, key: str) -> None:
        if key not in self._items:
            return
        super().remove_item(key)
        self._try_flush("removing", key)


def get_json(storage, key: str) -> Any:
    """Read and parse a JSON value; unreadable values count as absent."""
    try:
        item = storage.get_item(key)
        return json.loads(item) if item else None
    except (OSError, ValueError) as e:
        logger.error(f"Error getting item '{key}' from storage: {e}")
        return None


def set_json(storage, key: str, value: Any) -> None:
    """Serialize a value to JSON and store it."""
    try:
        storage.set_item(key, json.dumps(value))
    except (OSError, TypeError, ValueError) as e:
        logger.error(f"Error setting item '{key}' in storage: {e}")


def create_storage():
    """Build the storage backend selected in settings."""
    if settings.STORAGE_BACKEND == "memory":
        logger.info("Using in-memory session storage")
        return MemoryStorage()
    logger.info(f"Using file session storage at {settings.STORAGE_PATH}")
    return JsonFileStorage(settings.STORAGE_PATH)
