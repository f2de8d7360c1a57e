"""Profile repository protocol."""

from typing import Protocol

from domain.entities.profile import Profile


class IProfileRepository(Protocol):
    """Repository interface for Profile entities in the remote store."""

    async def get(self, id: str) -> Profile | None:
        """Get a profile by user ID."""
        ...

    async def upsert(self, profile: Profile) -> Profile:
        """Insert the profile or overwrite the existing row with the same ID."""
        ...
