"""Persistence interfaces consumed by the services.

Implementations must honour two contracts: `create` returns the entity it
was given (same id), and `update` on an unknown id returns None instead of
raising.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from taskclock.domain.activity import Activity
from taskclock.domain.comment import Comment
from taskclock.domain.filters import TaskFilters
from taskclock.domain.task import Task
from taskclock.domain.time_entry import TimeEntry
from taskclock.domain.user import User


class TaskRepository(ABC):
    @abstractmethod
    async def create(self, task: Task) -> Task: ...

    @abstractmethod
    async def find_by_id(self, task_id: str) -> Task | None: ...

    @abstractmethod
    async def update(self, task_id: str, patch: dict[str, Any]) -> Task | None: ...

    @abstractmethod
    async def list_all(self) -> list[Task]: ...

    @abstractmethod
    async def list_by_assignee(self, user_id: str) -> list[Task]: ...

    @abstractmethod
    async def search_and_filter(self, filters: TaskFilters) -> list[Task]: ...


class TimeEntryRepository(ABC):
    @abstractmethod
    async def create(self, entry: TimeEntry) -> TimeEntry: ...

    @abstractmethod
    async def create_active(self, entry: TimeEntry) -> TimeEntry | None:
        """Insert an active entry unless its user already has one (then return None)."""

    @abstractmethod
    async def find_by_id(self, entry_id: str) -> TimeEntry | None: ...

    @abstractmethod
    async def update(self, entry_id: str, patch: dict[str, Any]) -> TimeEntry | None: ...

    @abstractmethod
    async def find_active_by_user(self, user_id: str) -> TimeEntry | None: ...

    @abstractmethod
    async def find_by_task_and_user(self, task_id: str, user_id: str) -> list[TimeEntry]: ...

    @abstractmethod
    async def list_completed_in_range(self, from_: datetime, to: datetime) -> list[TimeEntry]:
        """Stopped entries whose start_time lies in [from_, to]."""


class CommentRepository(ABC):
    @abstractmethod
    async def create(self, comment: Comment) -> Comment: ...

    @abstractmethod
    async def find_by_id(self, comment_id: str) -> Comment | None: ...

    @abstractmethod
    async def find_by_task_id(self, task_id: str) -> list[Comment]:
        """Comments on a task, oldest first."""


class ActivityRepository(ABC):
    @abstractmethod
    async def create(self, activity: Activity) -> Activity: ...

    @abstractmethod
    async def find_by_task_id(self, task_id: str) -> list[Activity]:
        """Activities on a task, newest first."""


class UserRepository(ABC):
    @abstractmethod
    async def create(self, user: User) -> User: ...

    @abstractmethod
    async def find_by_id(self, user_id: str) -> User | None: ...

    @abstractmethod
    async def update(self, user_id: str, patch: dict[str, Any]) -> User | None: ...

    @abstractmethod
    async def increment_streak(self, user_id: str, updated_at: datetime) -> User | None:
        """Add one to streak_count (a missing count becomes 1)."""
