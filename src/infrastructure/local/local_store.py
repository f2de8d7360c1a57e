"""Local fallback store for profiles and pages.

Records live in an injected key-value backend under a fixed key layout:

    profile-{id}            JSON profile record
    page-{normalizedPath}   JSON page record
    user-pages-{userId}     JSON array of normalized paths
    all-profiles            JSON array of profile ids
    all-pages               JSON array of normalized paths

No method raises to the caller: storage and serialization failures are logged
and reported as ``None`` / ``False``.
"""

import json
from collections.abc import Mapping
from datetime import datetime
from typing import Any

import structlog

from domain.entities.page import Page
from domain.entities.profile import Profile
from domain.paths import normalize_path
from domain.repositories.key_value_store import IKeyValueStore, KeyValueStoreError

logger = structlog.get_logger()

ALL_PROFILES_KEY = "all-profiles"
ALL_PAGES_KEY = "all-pages"

_STORAGE_ERRORS = (KeyValueStoreError, TypeError, ValueError, KeyError)


def profile_key(id: str) -> str:
    return f"profile-{id}"


def page_key(path: str) -> str:
    return f"page-{path}"


def user_pages_key(user_id: str) -> str:
    return f"user-pages-{user_id}"


class LocalStore:
    """Profile and page persistence over a key-value backend."""

    def __init__(self, backend: IKeyValueStore) -> None:
        self._backend = backend

    # --- Profiles ---

    def store_profile(self, id: str, data: Mapping[str, Any]) -> bool:
        """Write a profile record stamped with ``lastUpdated``.

        Every key in ``data`` is stored; ``get_profile`` hands back the ones
        outside the editable fields in ``Profile.extra``.
        """
        try:
            record = {**data, "id": id, "lastUpdated": datetime.utcnow().isoformat()}
            self._write(profile_key(id), record)
            self._append_to_index(ALL_PROFILES_KEY, id)
            return True
        except _STORAGE_ERRORS as e:
            logger.error("local_store_profile_write_failed", profile_id=id, error=str(e))
            return False

    def get_profile(self, id: str) -> Profile | None:
        try:
            record = self._read(profile_key(id))
            if not isinstance(record, dict):
                return None
            return Profile.from_record({**record, "id": id})
        except _STORAGE_ERRORS as e:
            logger.error("local_store_profile_read_failed", profile_id=id, error=str(e))
            return None

    def get_all_profiles(self) -> list[str]:
        try:
            return self._read_index(ALL_PROFILES_KEY) or []
        except _STORAGE_ERRORS as e:
            logger.error("local_store_index_read_failed", index=ALL_PROFILES_KEY, error=str(e))
            return []

    # --- Pages ---

    def store_page(self, path: str, user_id: str) -> Page | None:
        """Create a page record for ``user_id`` under the normalized path."""
        normalized = normalize_path(path)
        try:
            if not normalized:
                raise ValueError(f"Path {path!r} is empty after normalization")
            page = Page(path=normalized, user_id=user_id)
            self._write(page_key(normalized), page.to_record())
            self._append_to_index(ALL_PAGES_KEY, normalized)
            self._append_to_index(user_pages_key(user_id), normalized)
            return page
        except _STORAGE_ERRORS as e:
            logger.error(
                "local_store_page_write_failed", path=normalized, user_id=user_id, error=str(e)
            )
            return None

    def get_page_by_path(self, path: str) -> Page | None:
        normalized = normalize_path(path)
        if not normalized:
            return None
        try:
            record = self._read(page_key(normalized))
            if isinstance(record, dict):
                return Page.from_record(record)

            # Entries written under older normalization rules are only
            # reachable through the index.
            for stored_path in self._read_index(ALL_PAGES_KEY) or []:
                if stored_path == normalized or normalize_path(stored_path) != normalized:
                    continue
                record = self._read(page_key(stored_path))
                if isinstance(record, dict):
                    return self._migrate_legacy_page(stored_path, normalized, record)
            return None
        except _STORAGE_ERRORS as e:
            logger.error("local_store_page_read_failed", path=normalized, error=str(e))
            return None

    def get_user_page(self, user_id: str) -> Page | None:
        """The user's page; a user has at most one."""
        paths = self.get_user_pages(user_id)
        if not paths:
            return None
        return self.get_page_by_path(paths[0])

    def get_user_pages(self, user_id: str) -> list[str] | None:
        try:
            return self._read_index(user_pages_key(user_id))
        except _STORAGE_ERRORS as e:
            logger.error("local_store_index_read_failed", user_id=user_id, error=str(e))
            return None

    def get_all_pages(self) -> list[str]:
        try:
            return self._read_index(ALL_PAGES_KEY) or []
        except _STORAGE_ERRORS as e:
            logger.error("local_store_index_read_failed", index=ALL_PAGES_KEY, error=str(e))
            return []

    def update_page(self, path: str, updates: Mapping[str, Any]) -> bool:
        """Merge ``updates`` into an existing page; the path itself is kept."""
        normalized = normalize_path(path)
        try:
            record = self._read(page_key(normalized)) if normalized else None
            if not isinstance(record, dict):
                return False
            record.update(updates)
            record["path"] = normalized
            record["updated_at"] = datetime.utcnow().isoformat()
            self._write(page_key(normalized), record)
            return True
        except _STORAGE_ERRORS as e:
            logger.error("local_store_page_update_failed", path=normalized, error=str(e))
            return False

    # --- Maintenance ---

    def clear_all_data(self) -> bool:
        """Delete every profile, page and index. Used for resets and tests."""
        try:
            for id in self._read_index(ALL_PROFILES_KEY) or []:
                self._backend.delete(profile_key(id))
                self._backend.delete(user_pages_key(id))
            for path in self._read_index(ALL_PAGES_KEY) or []:
                record = self._read(page_key(path))
                if isinstance(record, dict) and record.get("user_id"):
                    self._backend.delete(user_pages_key(str(record["user_id"])))
                self._backend.delete(page_key(path))
            self._backend.delete(ALL_PROFILES_KEY)
            self._backend.delete(ALL_PAGES_KEY)
            return True
        except _STORAGE_ERRORS as e:
            logger.error("local_store_clear_failed", error=str(e))
            return False

    def ping(self) -> bool:
        """Check the backend can be read."""
        try:
            self._backend.keys()
            return True
        except KeyValueStoreError:
            return False

    # --- Internals (these raise) ---

    def _migrate_legacy_page(
        self, stored_path: str, normalized: str, record: dict[str, Any]
    ) -> Page:
        """Move a legacy entry under its canonical key and fix the indices.

        The returned page always carries the normalized path, even when the
        rewrite itself fails.
        """
        page = Page.from_record({**record, "path": normalized})
        try:
            self._write(page_key(normalized), page.to_record())
            self._replace_in_index(ALL_PAGES_KEY, stored_path, normalized)
            self._replace_in_index(user_pages_key(page.user_id), stored_path, normalized)
            self._backend.delete(page_key(stored_path))
        except _STORAGE_ERRORS as e:
            logger.warning(
                "local_store_legacy_page_migration_failed", path=normalized, error=str(e)
            )
            return page
        logger.info("local_store_legacy_page_migrated", old_path=stored_path, path=normalized)
        return page

    def _replace_in_index(self, key: str, old: str, new: str) -> None:
        index = self._read_index(key)
        if index is None:
            return
        replaced: list[str] = []
        for item in index:
            item = new if item == old else item
            if item not in replaced:
                replaced.append(item)
        self._write(key, replaced)

    def _read(self, key: str) -> Any:
        raw = self._backend.get(key)
        return json.loads(raw) if raw is not None else None

    def _write(self, key: str, value: Any) -> None:
        self._backend.set(key, json.dumps(value))

    def _read_index(self, key: str) -> list[str] | None:
        value = self._read(key)
        if value is None:
            return None
        if not isinstance(value, list):
            raise ValueError(f"Index {key} is not a JSON array")
        return [str(item) for item in value]

    def _append_to_index(self, key: str, item: str) -> None:
        index = self._read_index(key) or []
        if item not in index:
            index.append(item)
            self._write(key, index)
