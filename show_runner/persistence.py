"""Key-value persistence for the score ledger and team roster.

The store mirrors browser local storage: string keys, string values, no schema
versioning. Two adapters are provided: an in-memory store for tests and a
JSON-file store for a durable local show.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from typing import Any, Dict, Optional, Protocol

_logger = logging.getLogger("persistence")


class KeyValueStore(Protocol):
    """Minimum interface the ledger needs from a store."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class InMemoryStore:
    """Dict-backed store; contents vanish with the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = str(value)

    def snapshot(self) -> Dict[str, str]:
        return dict(self._data)


class JsonFileStore:
    """Store persisted as one JSON object on disk.

    Every ``set`` rewrites the file through a temp file + rename so a crash
    mid-write never leaves a truncated tally behind. Read failures are logged
    and the store starts empty.
    """

    def __init__(self, path: str, logger: Optional[Any] = None) -> None:
        self._path = path
        self._logger = logger or _logger
        self._lock = threading.Lock()
        self._data: Dict[str, str] = self._load()

    @property
    def path(self) -> str:
        return self._path

    def _load(self) -> Dict[str, str]:
        if not os.path.isfile(self._path):
            return {}
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as exc:
            self._logger.warning(f"[STORE] Failed to read {self._path}: {exc}")
            return {}
        if not isinstance(data, dict):
            self._logger.warning(f"[STORE] Ignoring non-object store file {self._path}")
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = str(value)
            self._flush()

    def _flush(self) -> None:
        directory = os.path.dirname(os.path.abspath(self._path))
        tmp_path = self._path + ".tmp"
        try:
            os.makedirs(directory, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(self._data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self._path)
        except OSError as exc:
            self._logger.error(f"[STORE] Failed to write {self._path}: {exc}")
