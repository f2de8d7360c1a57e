"""SQLAlchemy implementation of Page repository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.page import Page
from infrastructure.database.models import PageModel


class SQLAlchemyPageRepository:
    """SQLAlchemy implementation of IPageRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_path(self, path: str) -> Page | None:
        """Get a page by its normalized path."""
        stmt = select(PageModel).where(PageModel.path == path)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_user(self, user_id: str) -> Page | None:
        """Get the page owned by a user."""
        stmt = select(PageModel).where(PageModel.user_id == user_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def upsert(self, page: Page) -> Page:
        """Insert the page, or refresh the row already holding this path.

        An existing row keeps its own ID and creation time.
        """
        stmt = select(PageModel).where(PageModel.path == page.path)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            model = self._to_model(page)
            self._session.add(model)
        else:
            model.user_id = page.user_id
            model.updated_at = page.updated_at

        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    def _to_entity(self, model: PageModel) -> Page:
        """Convert ORM model to domain entity."""
        return Page(
            id=model.id,
            path=model.path,
            user_id=model.user_id,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Page) -> PageModel:
        """Convert domain entity to ORM model."""
        return PageModel(
            id=entity.id,
            path=entity.path,
            user_id=entity.user_id,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
