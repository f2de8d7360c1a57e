"""Public page resolution across the remote and local stores."""

import asyncio
from collections.abc import Awaitable, Callable

import structlog

from domain.entities.resolution import PageResolution, ResolutionSource
from domain.paths import normalize_path
from domain.services.tiered_page_repository import TieredPageRepository

logger = structlog.get_logger()

RETRY_DELAY_SECONDS = 2.0
MAX_RETRIES = 1

ActivityCheck = Callable[[], Awaitable[bool]]


class PageResolver:
    """Resolves a page path to its (profile, page) pair.

    Lookup order per attempt: remote store, then local store. A page found
    only locally is pushed to the remote store on the first attempt so other
    devices can see it. When nothing is found the lookup is retried once after
    a delay, to ride out propagation lag in the remote store.
    """

    def __init__(
        self,
        repository: TieredPageRepository,
        retry_delay: float = RETRY_DELAY_SECONDS,
        max_retries: int = MAX_RETRIES,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._repository = repository
        self._retry_delay = retry_delay
        self._max_retries = max_retries
        self._sleep = sleep
        self._tasks: set[asyncio.Task[PageResolution]] = set()

    async def resolve(
        self, path: str | None, *, is_active: ActivityCheck | None = None
    ) -> PageResolution:
        """Resolve ``path``; never raises for missing data or store faults.

        ``is_active`` is polled after each retry delay; once it reports the
        requester is gone the resolution stops with a cancelled result.
        """
        normalized = normalize_path(path)
        if not normalized:
            logger.info("page_resolution_rejected", path=path)
            return PageResolution.not_found(path or "", attempts=0)

        retry_count = 0
        while True:
            attempt = retry_count + 1

            hit = await self._repository.find_remote(normalized)
            if hit is not None:
                profile, page = hit
                logger.info("page_resolved", path=normalized, source="remote", attempt=attempt)
                return PageResolution.found_in(
                    ResolutionSource.REMOTE, normalized, profile, page, attempt
                )

            hit = self._repository.find_local(normalized)
            if hit is not None:
                profile, page = hit
                if retry_count == 0:
                    await self._repository.seed_remote(profile, page)
                logger.info("page_resolved", path=normalized, source="local", attempt=attempt)
                return PageResolution.found_in(
                    ResolutionSource.LOCAL, normalized, profile, page, attempt
                )

            if retry_count >= self._max_retries:
                logger.info("page_not_found", path=normalized, attempts=attempt)
                return PageResolution.not_found(normalized, attempts=attempt)

            retry_count += 1
            logger.debug(
                "page_resolution_retry_scheduled",
                path=normalized,
                delay_seconds=self._retry_delay,
            )
            await self._sleep(self._retry_delay)

            if is_active is not None and not await is_active():
                logger.info("page_resolution_abandoned", path=normalized, attempts=attempt)
                return PageResolution.cancelled(normalized, attempts=attempt)

    def start(
        self, path: str | None, *, is_active: ActivityCheck | None = None
    ) -> asyncio.Task[PageResolution]:
        """Schedule a resolution as a task that ``cancel_all`` can stop."""
        task = asyncio.create_task(self.resolve(path, is_active=is_active))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    async def cancel_all(self) -> None:
        """Cancel every scheduled resolution and wait for them to unwind."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
