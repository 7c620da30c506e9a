"""Typed task listing filters and the in-process filtering they describe."""

from collections.abc import Iterable
from datetime import UTC, datetime, time
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from taskclock.domain.task import Priority, Task, TaskStatus


SortField = Literal["due_date", "created_at"]
SortOrder = Literal["asc", "desc"]

# Query-string spelling of the sort fields.
SortParam = Literal["dueDate", "createdAt"]
SORT_PARAM_FIELDS: dict[str, SortField] = {"dueDate": "due_date", "createdAt": "created_at"}


class TaskFilters(BaseModel):
    """Optional narrowing and ordering for task listings."""

    model_config = ConfigDict(frozen=True)

    status: TaskStatus | None = None
    priority: Priority | None = None
    assignee_user_id: str | None = None
    tag: str | None = None
    search_query: str | None = Field(default=None, description="Case-insensitive match on title or description")
    sort_by: SortField | None = None
    sort_order: SortOrder | None = None

    def is_empty(self) -> bool:
        return all(value is None for value in self.model_dump().values())

    def for_assignee(self, user_id: str) -> "TaskFilters":
        """Copy of these filters pinned to one assignee."""
        return self.model_copy(update={"assignee_user_id": user_id})


def _sort_key(task: Task, sort_by: SortField) -> float:
    # Tasks without a due date sort as if due at the epoch.
    if sort_by == "due_date":
        if task.due_date is None:
            return 0.0
        return datetime.combine(task.due_date, time.min, tzinfo=UTC).timestamp()
    return task.created_at.timestamp()


def matches(task: Task, filters: TaskFilters) -> bool:
    """Whether a task passes every equality, tag and search filter."""
    if filters.status is not None and task.status != filters.status:
        return False
    if filters.priority is not None and task.priority != filters.priority:
        return False
    if filters.assignee_user_id is not None and task.assignee_user_id != filters.assignee_user_id:
        return False
    if filters.tag is not None and filters.tag not in task.tags:
        return False
    if filters.search_query:
        needle = filters.search_query.lower()
        return needle in task.title.lower() or needle in task.description.lower()
    return True


def apply_task_filters(tasks: Iterable[Task], filters: TaskFilters) -> list[Task]:
    """Filter, then sort when `sort_by` is given (ascending unless asked otherwise)."""
    result = [task for task in tasks if matches(task, filters)]
    if filters.sort_by is not None:
        sort_by = filters.sort_by
        result.sort(key=lambda task: _sort_key(task, sort_by), reverse=filters.sort_order == "desc")
    return result
