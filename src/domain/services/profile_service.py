"""Profile service: the owner-facing dashboard flow."""

from collections.abc import Callable
from typing import Any

import structlog
from sqlalchemy.exc import SQLAlchemyError

from core.exceptions import PageNotFoundError, PagePathTakenError, RemoteStoreError
from domain.entities.page import Page
from domain.entities.profile import DEFAULT_AVATAR, Profile
from domain.paths import DEFAULT_PATH_LENGTH, generate_random_path
from domain.repositories.unit_of_work import IUnitOfWork
from infrastructure.local.local_store import LocalStore

logger = structlog.get_logger()

MAX_PATH_ATTEMPTS = 5

_REMOTE_ERRORS = (SQLAlchemyError, OSError)


class ProfileService:
    """Reads and saves a user's profile and creates their page.

    The remote store is written first; every successful save is mirrored into
    the local store so the page stays resolvable on this node even when the
    remote store lags or is unreachable.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        local_store: LocalStore,
        path_length: int = DEFAULT_PATH_LENGTH,
        path_generator: Callable[[int], str] = generate_random_path,
    ) -> None:
        self._uow_factory = uow_factory
        self._local = local_store
        self._path_length = path_length
        self._path_generator = path_generator

    async def get_dashboard(self, user_id: str) -> tuple[Profile | None, Page | None]:
        """The user's profile and page, preferring the remote copies."""
        profile: Profile | None = None
        page: Page | None = None
        try:
            async with self._uow_factory() as uow:
                profile = await uow.profiles.get(user_id)
                page = await uow.pages.get_by_user(user_id)
        except _REMOTE_ERRORS as e:
            logger.warning("remote_dashboard_read_failed", user_id=user_id, error=str(e))

        if profile is None:
            profile = self._local.get_profile(user_id)
        if page is None:
            page = self._local.get_user_page(user_id)
        return profile, page

    async def get_own_page(self, user_id: str) -> Page:
        """The user's published page."""
        _, page = await self.get_dashboard(user_id)
        if page is None:
            raise PageNotFoundError(path="", message="You have not published a page yet")
        return page

    async def save_profile(self, user_id: str, changes: dict[str, Any]) -> tuple[Profile, Page]:
        """Save profile edits, creating the user's page on the first save."""
        try:
            async with self._uow_factory() as uow:
                profile = await uow.profiles.get(user_id)
                if profile is None:
                    profile = Profile(id=user_id, avatar=DEFAULT_AVATAR)
                profile.apply(changes)
                saved = await uow.profiles.upsert(profile)

                page = await uow.pages.get_by_user(user_id)
                if page is None:
                    page = await self._allocate_page(uow, user_id)
                    logger.info("page_created", user_id=user_id, path=page.path)

                await uow.commit()
        except _REMOTE_ERRORS as e:
            logger.error("remote_profile_save_failed", user_id=user_id, error=str(e))
            self._save_locally_only(user_id, changes)
            raise RemoteStoreError("save_profile") from e

        self._mirror(saved, page)
        return saved, page

    async def _allocate_page(self, uow: IUnitOfWork, user_id: str) -> Page:
        """Create the user's page under a path no other page uses.

        A page the user already has in the local store keeps its path.
        """
        candidates: list[str] = []
        local_page = self._local.get_user_page(user_id)
        if local_page is not None:
            candidates.append(local_page.path)

        for attempt in range(MAX_PATH_ATTEMPTS):
            path = candidates.pop() if candidates else self._path_generator(self._path_length)
            if await uow.pages.get_by_path(path) is None:
                return await uow.pages.upsert(Page(path=path, user_id=user_id))
            logger.debug("page_path_collision", path=path, attempt=attempt + 1)

        raise PagePathTakenError(MAX_PATH_ATTEMPTS)

    def _mirror(self, profile: Profile, page: Page) -> None:
        self._local.store_profile(profile.id, profile.editable_fields())
        if self._local.get_page_by_path(page.path) is None:
            self._local.store_page(page.path, page.user_id)
        self._local.update_page(
            page.path,
            {
                "id": page.id,
                "user_id": page.user_id,
                "created_at": page.created_at.isoformat(),
            },
        )

    def _save_locally_only(self, user_id: str, changes: dict[str, Any]) -> None:
        profile = self._local.get_profile(user_id) or Profile(id=user_id, avatar=DEFAULT_AVATAR)
        profile.apply(changes)
        self._local.store_profile(user_id, profile.to_record())
        if self._local.get_user_page(user_id) is None:
            self._local.store_page(self._path_generator(self._path_length), user_id)
