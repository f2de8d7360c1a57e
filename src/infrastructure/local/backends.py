"""Key-value backends for the local store."""

import json
import os
import tempfile
import threading
from pathlib import Path

from domain.repositories.key_value_store import KeyValueStoreError


class InMemoryKeyValueStore:
    """Process-local key-value map with an optional byte quota.

    The quota mirrors browser storage limits: a write that would push the
    total size of keys and values past ``max_bytes`` is rejected.
    """

    def __init__(self, max_bytes: int | None = None) -> None:
        self._data: dict[str, str] = {}
        self._max_bytes = max_bytes

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if self._max_bytes is not None:
            current = self._used_bytes() - self._entry_size(key, self._data.get(key))
            if current + self._entry_size(key, value) > self._max_bytes:
                raise KeyValueStoreError(f"Quota of {self._max_bytes} bytes exceeded")
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)

    def _used_bytes(self) -> int:
        return sum(self._entry_size(k, v) for k, v in self._data.items())

    @staticmethod
    def _entry_size(key: str, value: str | None) -> int:
        if value is None:
            return 0
        return len(key.encode("utf-8")) + len(value.encode("utf-8"))


class JsonFileKeyValueStore:
    """Key-value map persisted as a single JSON object on disk.

    Nothing is cached: every operation reads the file, and every mutation
    re-reads it, changes the one key and writes the result through a
    temporary file and an atomic replace. Several instances (or worker
    processes) sharing the file therefore see each other's keys, and readers
    never observe a half-written map.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._load()
            data[key] = value
            self._save(data)

    def delete(self, key: str) -> None:
        with self._lock:
            data = self._load()
            if data.pop(key, None) is not None:
                self._save(data)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._load())

    def _load(self) -> dict[str, str]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            raise KeyValueStoreError(f"Cannot read {self.path}: {e}") from e
        if not isinstance(raw, dict):
            raise KeyValueStoreError(f"{self.path} does not contain a JSON object")
        return {str(k): str(v) for k, v in raw.items()}

    def _save(self, data: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2, sort_keys=True)
                os.replace(tmp_name, self.path)
            except BaseException:
                os.unlink(tmp_name)
                raise
        except OSError as e:
            raise KeyValueStoreError(f"Cannot write {self.path}: {e}") from e
