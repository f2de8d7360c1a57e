"""Key-value store protocol backing the local store."""

from typing import Protocol


class KeyValueStoreError(Exception):
    """A key-value backend could not read or write."""


class IKeyValueStore(Protocol):
    """Minimal string key-value capability.

    Implementations raise KeyValueStoreError when the underlying storage fails
    (quota exceeded, unreadable file, ...).
    """

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...

    def keys(self) -> list[str]:
        ...
