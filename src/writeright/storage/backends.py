"""Key-value backends for the preference store (memory, JSON + fcntl.flock + atomic write)."""

import copy
import fcntl
import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Protocol
from urllib.parse import quote


class StorageUnavailableError(Exception):
    """The backing store could not be read or written."""


class KeyValueStore(Protocol):
    def get(self, key: str) -> dict[str, Any] | None: ...

    def set(self, key: str, value: dict[str, Any]) -> None: ...


class InMemoryStore:
    """Process-local store. Values are deep-copied in and out."""

    def __init__(self) -> None:
        self._data: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> dict[str, Any] | None:
        with self._lock:
            value = self._data.get(key)
            return copy.deepcopy(value) if value is not None else None

    def set(self, key: str, value: dict[str, Any]) -> None:
        with self._lock:
            self._data[key] = copy.deepcopy(value)


class JsonFileStore:
    """One JSON document per key under ``root``.

    Args:
        root: Directory holding the documents. Created on first write.
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def path_for(self, key: str) -> Path:
        return self.root / f"{quote(key, safe='')}.json"

    def get(self, key: str) -> dict[str, Any] | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            with open(path, encoding="utf-8") as f:
                fcntl.flock(f, fcntl.LOCK_SH)
                data = json.load(f)
                fcntl.flock(f, fcntl.LOCK_UN)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageUnavailableError(f"cannot read {path}: {e}") from e
        return data

    def set(self, key: str, value: dict[str, Any]) -> None:
        path = self.path_for(key)
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", dir=self.root, delete=False, suffix=".json", encoding="utf-8"
            ) as tmp:
                json.dump(value, tmp, default=str)
            os.replace(tmp.name, path)
        except OSError as e:
            raise StorageUnavailableError(f"cannot write {path}: {e}") from e
