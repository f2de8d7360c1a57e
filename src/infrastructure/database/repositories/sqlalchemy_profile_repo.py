"""SQLAlchemy implementation of Profile repository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.profile import PROFILE_FIELDS, Profile
from infrastructure.database.models import ProfileModel


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: str) -> Profile | None:
        """Get a profile by user ID."""
        stmt = select(ProfileModel).where(ProfileModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def upsert(self, profile: Profile) -> Profile:
        """Insert the profile or overwrite the existing row with the same ID."""
        stmt = select(ProfileModel).where(ProfileModel.id == profile.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            model = self._to_model(profile)
            self._session.add(model)
        else:
            for name in PROFILE_FIELDS:
                setattr(model, name, getattr(profile, name))
            model.updated_at = profile.updated_at

        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    def _to_entity(self, model: ProfileModel) -> Profile:
        """Convert ORM model to domain entity."""
        return Profile(
            id=model.id,
            name=model.name,
            title=model.title,
            bio=model.bio,
            email=model.email,
            twitter=model.twitter,
            linkedin=model.linkedin,
            github=model.github,
            avatar=model.avatar,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Profile) -> ProfileModel:
        """Convert domain entity to ORM model."""
        return ProfileModel(
            id=entity.id,
            name=entity.name,
            title=entity.title,
            bio=entity.bio,
            email=entity.email,
            twitter=entity.twitter,
            linkedin=entity.linkedin,
            github=entity.github,
            avatar=entity.avatar,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
