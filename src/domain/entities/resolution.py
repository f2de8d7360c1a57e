"""Page resolution result value objects."""

from dataclasses import dataclass
from enum import StrEnum

from domain.entities.page import Page
from domain.entities.profile import Profile

NOT_FOUND_NOTICE = (
    "The page you're looking for doesn't exist or may have been moved. "
    "If it was created recently, it may take a moment to propagate; "
    "otherwise open it from the device where it was created, "
    "or sign in with the account that created it."
)


class ResolutionStatus(StrEnum):
    """Lifecycle of a single resolution: loading -> found | not_found."""

    LOADING = "loading"
    FOUND = "found"
    NOT_FOUND = "not_found"
    CANCELLED = "cancelled"


class ResolutionSource(StrEnum):
    """Which tier produced a found page."""

    REMOTE = "remote"
    LOCAL = "local"


@dataclass(frozen=True, slots=True)
class PageResolution:
    """Read-only outcome of resolving a public page path."""

    status: ResolutionStatus
    path: str
    profile: Profile | None = None
    page: Page | None = None
    source: ResolutionSource | None = None
    attempts: int = 0
    notice: str | None = None

    @property
    def found(self) -> bool:
        return self.status is ResolutionStatus.FOUND

    @classmethod
    def found_in(
        cls,
        source: ResolutionSource,
        path: str,
        profile: Profile,
        page: Page,
        attempts: int,
    ) -> "PageResolution":
        return cls(
            status=ResolutionStatus.FOUND,
            path=path,
            profile=profile,
            page=page,
            source=source,
            attempts=attempts,
        )

    @classmethod
    def not_found(cls, path: str, attempts: int) -> "PageResolution":
        return cls(
            status=ResolutionStatus.NOT_FOUND,
            path=path,
            attempts=attempts,
            notice=NOT_FOUND_NOTICE,
        )

    @classmethod
    def cancelled(cls, path: str, attempts: int) -> "PageResolution":
        return cls(status=ResolutionStatus.CANCELLED, path=path, attempts=attempts)
