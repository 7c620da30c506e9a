"""Pytest configuration and fixtures for integration tests."""

from collections.abc import AsyncGenerator
from datetime import UTC

import pytest

from taskclock.core.db_client import close_connection, init_db
from taskclock.domain.user import UserRole
from taskclock.repositories import Repositories, sqlite_repositories
from taskclock.services.container import Services, build_services
from tests.unit.mocks import ADMIN_ID, MEMBER_ID, OTHER_MEMBER_ID, FakeClock, make_user


@pytest.fixture
def db_path(tmp_path) -> str:
    return str(tmp_path / "taskclock_test.db")


@pytest.fixture
async def sqlite_repos(db_path: str) -> AsyncGenerator[Repositories]:
    """SQLite repositories over a fresh database file, closed after the test."""
    await init_db(db_path=db_path)
    yield sqlite_repositories(db_path=db_path)
    await close_connection(db_path=db_path)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
async def sqlite_services(sqlite_repos: Repositories, clock: FakeClock) -> Services:
    built = build_services(sqlite_repos, clock=clock, tz=UTC)
    await sqlite_repos.users.create(make_user(ADMIN_ID, UserRole.ADMIN))
    await sqlite_repos.users.create(make_user(MEMBER_ID))
    await sqlite_repos.users.create(make_user(OTHER_MEMBER_ID))
    return built
