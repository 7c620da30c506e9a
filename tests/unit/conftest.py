"""Pytest configuration and fixtures for unit tests."""

from datetime import UTC

import pytest

from taskclock.domain.task import Task
from taskclock.domain.user import UserRole
from taskclock.repositories import Repositories, memory_repositories
from taskclock.services.container import Services, build_services
from tests.unit.mocks import ADMIN_ID, MEMBER_ID, OTHER_MEMBER_ID, FakeClock, make_user


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def repositories() -> Repositories:
    """Fresh in-memory repositories for each test."""
    return memory_repositories()


@pytest.fixture
async def services(repositories: Repositories, clock: FakeClock) -> Services:
    built = build_services(repositories, clock=clock, tz=UTC)
    await repositories.users.create(make_user(ADMIN_ID, UserRole.ADMIN))
    await repositories.users.create(make_user(MEMBER_ID))
    await repositories.users.create(make_user(OTHER_MEMBER_ID))
    return built


@pytest.fixture
async def assigned_task(services: Services) -> Task:
    """A task created by the admin and assigned to MEMBER_ID."""
    return await services.tasks.create_task(
        creator_id=ADMIN_ID,
        title="Write report",
        description="Quarterly numbers",
        assignee_user_id=MEMBER_ID,
    )
