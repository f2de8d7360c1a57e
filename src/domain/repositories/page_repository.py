"""Page repository protocol."""

from typing import Protocol

from domain.entities.page import Page


class IPageRepository(Protocol):
    """Repository interface for Page entities in the remote store."""

    async def get_by_path(self, path: str) -> Page | None:
        """Get a page by its normalized path."""
        ...

    async def get_by_user(self, user_id: str) -> Page | None:
        """Get the page owned by a user."""
        ...

    async def upsert(self, page: Page) -> Page:
        """Insert the page or update the existing row with the same path."""
        ...
