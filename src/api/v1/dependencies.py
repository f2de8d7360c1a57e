"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Callable

from core.config import settings
from domain.repositories.key_value_store import IKeyValueStore
from domain.services.page_resolver import PageResolver
from domain.services.profile_service import ProfileService
from domain.services.tiered_page_repository import TieredPageRepository
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from infrastructure.local.backends import InMemoryKeyValueStore, JsonFileKeyValueStore
from infrastructure.local.local_store import LocalStore


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


def build_key_value_backend() -> IKeyValueStore:
    """Key-value backend selected by ``LOCAL_STORE_BACKEND``."""
    if settings.local_store_backend == "memory":
        return InMemoryKeyValueStore(max_bytes=settings.local_store_max_bytes)
    return JsonFileKeyValueStore(settings.local_store_path)


@lru_cache
def get_local_store() -> LocalStore:
    """Get the process-wide local store."""
    return LocalStore(build_key_value_backend())


@lru_cache
def get_page_resolver() -> PageResolver:
    """Get Page resolver instance."""
    return PageResolver(
        TieredPageRepository(get_uow_factory(), get_local_store()),
        retry_delay=settings.resolve_retry_delay_seconds,
        max_retries=settings.resolve_max_retries,
    )


@lru_cache
def get_profile_service() -> ProfileService:
    """Get Profile service instance."""
    return ProfileService(
        get_uow_factory(),
        get_local_store(),
        path_length=settings.page_path_length,
    )
