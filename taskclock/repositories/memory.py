"""Dict-backed repositories for tests and the `memory` storage backend.

Stored entities are frozen pydantic models, so they are handed out without
copying; updates replace the stored instance with a merged copy.
"""

import asyncio
from datetime import datetime
from typing import Any

from taskclock.domain.activity import Activity
from taskclock.domain.comment import Comment
from taskclock.domain.filters import TaskFilters, apply_task_filters
from taskclock.domain.task import Task
from taskclock.domain.time_entry import TimeEntry
from taskclock.domain.user import User
from taskclock.repositories.base import (
    ActivityRepository,
    CommentRepository,
    TaskRepository,
    TimeEntryRepository,
    UserRepository,
)


class InMemoryTaskRepository(TaskRepository):
    def __init__(self) -> None:
        self._tasks: dict[str, Task] = {}

    async def create(self, task: Task) -> Task:
        self._tasks[task.id] = task
        return task

    async def find_by_id(self, task_id: str) -> Task | None:
        return self._tasks.get(task_id)

    async def update(self, task_id: str, patch: dict[str, Any]) -> Task | None:
        existing = self._tasks.get(task_id)
        if existing is None:
            return None
        updated = existing.model_copy(update=patch)
        self._tasks[task_id] = updated
        return updated

    async def list_all(self) -> list[Task]:
        return list(self._tasks.values())

    async def list_by_assignee(self, user_id: str) -> list[Task]:
        return [task for task in self._tasks.values() if task.assignee_user_id == user_id]

    async def search_and_filter(self, filters: TaskFilters) -> list[Task]:
        return apply_task_filters(self._tasks.values(), filters)


class InMemoryTimeEntryRepository(TimeEntryRepository):
    def __init__(self) -> None:
        self._entries: dict[str, TimeEntry] = {}
        self._active_lock = asyncio.Lock()

    async def create(self, entry: TimeEntry) -> TimeEntry:
        self._entries[entry.id] = entry
        return entry

    async def create_active(self, entry: TimeEntry) -> TimeEntry | None:
        async with self._active_lock:
            if await self.find_active_by_user(entry.user_id) is not None:
                return None
            return await self.create(entry)

    async def find_by_id(self, entry_id: str) -> TimeEntry | None:
        return self._entries.get(entry_id)

    async def update(self, entry_id: str, patch: dict[str, Any]) -> TimeEntry | None:
        existing = self._entries.get(entry_id)
        if existing is None:
            return None
        # Re-validate so the end_time/duration pairing is checked on every stop.
        updated = TimeEntry.model_validate({**existing.model_dump(), **patch})
        self._entries[entry_id] = updated
        return updated

    async def find_active_by_user(self, user_id: str) -> TimeEntry | None:
        return next(
            (entry for entry in self._entries.values() if entry.user_id == user_id and entry.is_active),
            None,
        )

    async def find_by_task_and_user(self, task_id: str, user_id: str) -> list[TimeEntry]:
        return [entry for entry in self._entries.values() if entry.task_id == task_id and entry.user_id == user_id]

    async def list_completed_in_range(self, from_: datetime, to: datetime) -> list[TimeEntry]:
        return [
            entry for entry in self._entries.values() if not entry.is_active and from_ <= entry.start_time <= to
        ]


class InMemoryCommentRepository(CommentRepository):
    def __init__(self) -> None:
        self._comments: dict[str, Comment] = {}

    async def create(self, comment: Comment) -> Comment:
        self._comments[comment.id] = comment
        return comment

    async def find_by_id(self, comment_id: str) -> Comment | None:
        return self._comments.get(comment_id)

    async def find_by_task_id(self, task_id: str) -> list[Comment]:
        comments = [comment for comment in self._comments.values() if comment.task_id == task_id]
        return sorted(comments, key=lambda comment: comment.created_at)


class InMemoryActivityRepository(ActivityRepository):
    def __init__(self) -> None:
        self._activities: list[Activity] = []

    async def create(self, activity: Activity) -> Activity:
        self._activities.append(activity)
        return activity

    async def find_by_task_id(self, task_id: str) -> list[Activity]:
        # Newest first; activities created in the same instant keep latest-appended first.
        activities = [activity for activity in reversed(self._activities) if activity.task_id == task_id]
        return sorted(activities, key=lambda activity: activity.created_at, reverse=True)


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._users: dict[str, User] = {}

    async def create(self, user: User) -> User:
        self._users[user.id] = user
        return user

    async def find_by_id(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    async def update(self, user_id: str, patch: dict[str, Any]) -> User | None:
        existing = self._users.get(user_id)
        if existing is None:
            return None
        updated = existing.model_copy(update=patch)
        self._users[user_id] = updated
        return updated

    async def increment_streak(self, user_id: str, updated_at: datetime) -> User | None:
        existing = self._users.get(user_id)
        if existing is None:
            return None
        return await self.update(user_id, {"streak_count": (existing.streak_count or 0) + 1, "updated_at": updated_at})
