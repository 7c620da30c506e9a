"""Repositories backed by the SQLite client in `taskclock.core.db_client`."""

import json
import logging
from datetime import datetime
from typing import Any

from taskclock.core import db_client
from taskclock.core.db_client import Condition, UniqueConstraintError
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


logger = logging.getLogger(__name__)


def _task_from_row(row: dict[str, Any]) -> Task:
    return Task.model_validate({**row, "tags": json.loads(row["tags"] or "[]")})


class _SqliteRepository:
    collection: str

    def __init__(self, *, db_path: str | None = None) -> None:
        self._db_path = db_path

    async def _insert(self, data: dict[str, Any]) -> dict[str, Any]:
        return await db_client.create_record(collection=self.collection, data=data, db_path=self._db_path)

    async def _get(self, record_id: str) -> dict[str, Any] | None:
        return await db_client.get_record(collection=self.collection, record_id=record_id, db_path=self._db_path)

    async def _update(self, record_id: str, patch: dict[str, Any]) -> dict[str, Any] | None:
        return await db_client.update_record(
            collection=self.collection, record_id=record_id, data=patch, db_path=self._db_path
        )

    async def _list(self, conditions: list[Condition] | None = None, sort: str = "") -> list[dict[str, Any]]:
        return await db_client.list_records(
            collection=self.collection, conditions=conditions or [], sort=sort, db_path=self._db_path
        )


class SqliteTaskRepository(_SqliteRepository, TaskRepository):
    collection = "tasks"

    async def create(self, task: Task) -> Task:
        return _task_from_row(await self._insert(task.model_dump()))

    async def find_by_id(self, task_id: str) -> Task | None:
        row = await self._get(task_id)
        return _task_from_row(row) if row else None

    async def update(self, task_id: str, patch: dict[str, Any]) -> Task | None:
        row = await self._update(task_id, patch)
        return _task_from_row(row) if row else None

    async def list_all(self) -> list[Task]:
        return [_task_from_row(row) for row in await self._list()]

    async def list_by_assignee(self, user_id: str) -> list[Task]:
        return [_task_from_row(row) for row in await self._list([("assignee_user_id", "=", user_id)])]

    async def search_and_filter(self, filters: TaskFilters) -> list[Task]:
        # Equality filters narrow in SQL; tag, search and ordering run over the result.
        conditions: list[Condition] = []
        if filters.status is not None:
            conditions.append(("status", "=", filters.status))
        if filters.priority is not None:
            conditions.append(("priority", "=", filters.priority))
        if filters.assignee_user_id is not None:
            conditions.append(("assignee_user_id", "=", filters.assignee_user_id))
        rows = await self._list(conditions)
        return apply_task_filters((_task_from_row(row) for row in rows), filters)


class SqliteTimeEntryRepository(_SqliteRepository, TimeEntryRepository):
    collection = "time_entries"

    async def create(self, entry: TimeEntry) -> TimeEntry:
        return TimeEntry.model_validate(await self._insert(entry.model_dump()))

    async def create_active(self, entry: TimeEntry) -> TimeEntry | None:
        try:
            return await self.create(entry)
        except UniqueConstraintError as e:
            # Only the one-active-per-user index signals a running timer.
            if e.columns != ("user_id",):
                raise
            logger.info("Rejected second active time entry", extra={"user_id": entry.user_id})
            return None

    async def find_by_id(self, entry_id: str) -> TimeEntry | None:
        row = await self._get(entry_id)
        return TimeEntry.model_validate(row) if row else None

    async def update(self, entry_id: str, patch: dict[str, Any]) -> TimeEntry | None:
        row = await self._update(entry_id, patch)
        return TimeEntry.model_validate(row) if row else None

    async def find_active_by_user(self, user_id: str) -> TimeEntry | None:
        row = await db_client.get_first_record(
            collection=self.collection,
            conditions=[("user_id", "=", user_id), ("end_time", "=", None)],
            db_path=self._db_path,
        )
        return TimeEntry.model_validate(row) if row else None

    async def find_by_task_and_user(self, task_id: str, user_id: str) -> list[TimeEntry]:
        rows = await self._list([("task_id", "=", task_id), ("user_id", "=", user_id)], sort="start_time ASC")
        return [TimeEntry.model_validate(row) for row in rows]

    async def list_completed_in_range(self, from_: datetime, to: datetime) -> list[TimeEntry]:
        rows = await self._list(
            [("end_time", "!=", None), ("start_time", ">=", from_), ("start_time", "<=", to)],
            sort="start_time ASC",
        )
        return [TimeEntry.model_validate(row) for row in rows]


class SqliteCommentRepository(_SqliteRepository, CommentRepository):
    collection = "comments"

    async def create(self, comment: Comment) -> Comment:
        return Comment.model_validate(await self._insert(comment.model_dump()))

    async def find_by_id(self, comment_id: str) -> Comment | None:
        row = await self._get(comment_id)
        return Comment.model_validate(row) if row else None

    async def find_by_task_id(self, task_id: str) -> list[Comment]:
        rows = await self._list([("task_id", "=", task_id)], sort="created_at ASC")
        return [Comment.model_validate(row) for row in rows]


class SqliteActivityRepository(_SqliteRepository, ActivityRepository):
    collection = "activities"

    async def create(self, activity: Activity) -> Activity:
        return Activity.model_validate(await self._insert(activity.model_dump()))

    async def find_by_task_id(self, task_id: str) -> list[Activity]:
        rows = await self._list([("task_id", "=", task_id)], sort="created_at DESC")
        return [Activity.model_validate(row) for row in rows]


class SqliteUserRepository(_SqliteRepository, UserRepository):
    collection = "users"

    async def create(self, user: User) -> User:
        return User.model_validate(await self._insert(user.model_dump()))

    async def find_by_id(self, user_id: str) -> User | None:
        row = await self._get(user_id)
        return User.model_validate(row) if row else None

    async def update(self, user_id: str, patch: dict[str, Any]) -> User | None:
        row = await self._update(user_id, patch)
        return User.model_validate(row) if row else None

    async def increment_streak(self, user_id: str, updated_at: datetime) -> User | None:
        row = await db_client.increment_field(
            collection=self.collection,
            record_id=user_id,
            field="streak_count",
            data={"updated_at": updated_at},
            db_path=self._db_path,
        )
        return User.model_validate(row) if row else None
