"""Repository interfaces and their in-memory and SQLite implementations."""

from dataclasses import dataclass

from taskclock.repositories.base import (
    ActivityRepository,
    CommentRepository,
    TaskRepository,
    TimeEntryRepository,
    UserRepository,
)
from taskclock.repositories.memory import (
    InMemoryActivityRepository,
    InMemoryCommentRepository,
    InMemoryTaskRepository,
    InMemoryTimeEntryRepository,
    InMemoryUserRepository,
)
from taskclock.repositories.sqlite import (
    SqliteActivityRepository,
    SqliteCommentRepository,
    SqliteTaskRepository,
    SqliteTimeEntryRepository,
    SqliteUserRepository,
)


@dataclass(frozen=True)
class Repositories:
    """One repository per entity, as consumed by `build_services`."""

    tasks: TaskRepository
    time_entries: TimeEntryRepository
    comments: CommentRepository
    activities: ActivityRepository
    users: UserRepository


def memory_repositories() -> Repositories:
    return Repositories(
        tasks=InMemoryTaskRepository(),
        time_entries=InMemoryTimeEntryRepository(),
        comments=InMemoryCommentRepository(),
        activities=InMemoryActivityRepository(),
        users=InMemoryUserRepository(),
    )


def sqlite_repositories(*, db_path: str | None = None) -> Repositories:
    return Repositories(
        tasks=SqliteTaskRepository(db_path=db_path),
        time_entries=SqliteTimeEntryRepository(db_path=db_path),
        comments=SqliteCommentRepository(db_path=db_path),
        activities=SqliteActivityRepository(db_path=db_path),
        users=SqliteUserRepository(db_path=db_path),
    )


__all__ = [
    "ActivityRepository",
    "CommentRepository",
    "InMemoryActivityRepository",
    "InMemoryCommentRepository",
    "InMemoryTaskRepository",
    "InMemoryTimeEntryRepository",
    "InMemoryUserRepository",
    "Repositories",
    "SqliteActivityRepository",
    "SqliteCommentRepository",
    "SqliteTaskRepository",
    "SqliteTimeEntryRepository",
    "SqliteUserRepository",
    "TaskRepository",
    "TimeEntryRepository",
    "UserRepository",
    "memory_repositories",
    "sqlite_repositories",
]
