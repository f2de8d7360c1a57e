"""Shared fixtures for unit tests."""

from typing import Any
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest


class FakeUnitOfWork:
    """Fake Unit of Work with profile and page repository mocks."""

    def __init__(self) -> None:
        self.profiles = AsyncMock()
        self.pages = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork with empty repositories."""
    uow = FakeUnitOfWork()
    uow.profiles.get.return_value = None
    uow.pages.get_by_path.return_value = None
    uow.pages.get_by_user.return_value = None
    return uow


@pytest.fixture
def user_id() -> str:
    """A random user ID."""
    return str(uuid4())
