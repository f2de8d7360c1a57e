"""Two-tier (remote + local) page lookup.

Merge policy: the remote store is authoritative; the local store only seeds
it. Data flows local -> remote, never the other way.
"""

from collections.abc import Callable
from typing import Protocol

import structlog

from domain.entities.page import Page
from domain.entities.profile import Profile
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()

PageHit = tuple[Profile, Page]


class ILocalPageStore(Protocol):
    """The slice of the local store used for lookups."""

    def get_page_by_path(self, path: str) -> Page | None:
        ...

    def get_profile(self, id: str) -> Profile | None:
        ...


class TieredPageRepository:
    """Looks pages up in the remote store and the local fallback store.

    Every method absorbs faults: a failing tier behaves like an empty one.
    Paths passed in must already be normalized.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        local_store: ILocalPageStore,
    ) -> None:
        self._uow_factory = uow_factory
        self._local = local_store

    async def find_remote(self, path: str) -> PageHit | None:
        """Page by path, then its owner's profile, from the remote store."""
        try:
            async with self._uow_factory() as uow:
                page = await uow.pages.get_by_path(path)
                if page is None:
                    return None
                profile = await uow.profiles.get(page.user_id)
                if profile is None:
                    logger.warning(
                        "remote_page_without_profile", path=path, user_id=page.user_id
                    )
                    return None
                return profile, page
        except Exception as e:
            logger.warning("remote_lookup_failed", path=path, error=str(e), exc_info=True)
            return None

    def find_local(self, path: str) -> PageHit | None:
        """Page by path, then its owner's profile, from the local store."""
        try:
            page = self._local.get_page_by_path(path)
            if page is None:
                return None
            profile = self._local.get_profile(page.user_id)
            if profile is None:
                return None
            return profile, page
        except Exception as e:
            logger.warning("local_lookup_failed", path=path, error=str(e), exc_info=True)
            return None

    async def seed_remote(self, profile: Profile, page: Page) -> bool:
        """Upsert a locally known profile, then its page, into the remote store."""
        try:
            async with self._uow_factory() as uow:
                await uow.profiles.upsert(profile)
                await uow.pages.upsert(page)
                await uow.commit()
        except Exception as e:
            logger.warning(
                "remote_seed_failed",
                path=page.path,
                user_id=profile.id,
                error=str(e),
            )
            return False

        logger.info("remote_seeded_from_local", path=page.path, user_id=profile.id)
        return True
