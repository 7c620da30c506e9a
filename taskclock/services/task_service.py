"""Task service for creating, updating, assigning and completing tasks."""

import logging
import uuid
from collections.abc import Iterable, Mapping
from datetime import date
from typing import Any

from taskclock.core.clock import Clock
from taskclock.core.config import Constants
from taskclock.core.errors import NotFoundError, ValidationError
from taskclock.core.logging import span
from taskclock.domain.activity import ActivityType
from taskclock.domain.filters import TaskFilters
from taskclock.domain.task import Priority, Task, TaskStatus
from taskclock.domain.update_models import TaskPatch
from taskclock.domain.user import UserRole
from taskclock.domain.validators import validate_description, validate_tags, validate_title
from taskclock.models.service_models import TaskCompletion
from taskclock.repositories.base import TaskRepository
from taskclock.services.access_control import ensure_assignee, load_task, load_task_for_user
from taskclock.services.activity_service import ActivityEffect, ActivityService
from taskclock.services.time_entry_service import TimeEntryService


logger = logging.getLogger(__name__)

_NON_NULLABLE_FIELDS = ("status", "priority")


def assignment_message(assignee_user_id: str | None) -> str:
    return f"Assigned to user {assignee_user_id}" if assignee_user_id else "Unassigned"


def due_date_message(due_date: date | None) -> str:
    return f"Due date set to {due_date.isoformat() if due_date else None}"


def task_change_effects(
    before: Task, after: Task, changed_fields: Iterable[str], actor_user_id: str
) -> list[ActivityEffect]:
    """One effect per tracked field that was sent and whose value actually changed.

    Title and description edits are not tracked. Tags compare as ordered
    sequences, so reordering counts as a change.
    """
    fields = set(changed_fields)
    tracked = [
        ("status", ActivityType.TASK_STATUS_CHANGED, f"Status changed to {after.status}"),
        ("assignee_user_id", ActivityType.TASK_ASSIGNED, assignment_message(after.assignee_user_id)),
        ("priority", ActivityType.TASK_PRIORITY_CHANGED, f"Priority changed to {after.priority}"),
        ("due_date", ActivityType.TASK_DUE_DATE_CHANGED, due_date_message(after.due_date)),
        ("tags", ActivityType.TASK_TAGS_CHANGED, "Tags updated"),
    ]
    return [
        ActivityEffect(after.id, activity_type, message, actor_user_id)
        for field, activity_type, message in tracked
        if field in fields and getattr(before, field) != getattr(after, field)
    ]


def _validate_patch(changes: Mapping[str, Any]) -> dict[str, Any]:
    """Check the provided fields and return them in storable form."""
    validated = dict(changes)
    if "title" in validated:
        validated["title"] = validate_title(validated["title"])
    if "description" in validated:
        validated["description"] = validate_description(validated["description"])
    if "tags" in validated:
        validated["tags"] = validate_tags(validated["tags"])
    if "assignee_user_id" in validated:
        validated["assignee_user_id"] = validated["assignee_user_id"] or None
    for field in _NON_NULLABLE_FIELDS:
        if field in validated and validated[field] is None:
            msg = f"{field.capitalize()} cannot be null"
            raise ValidationError(msg)
    return validated


class TaskService:
    def __init__(
        self,
        *,
        tasks: TaskRepository,
        activity_service: ActivityService,
        time_entry_service: TimeEntryService,
        clock: Clock,
    ) -> None:
        self._tasks = tasks
        self._activity_service = activity_service
        self._time_entry_service = time_entry_service
        self._clock = clock

    async def create_task(
        self,
        *,
        creator_id: str,
        title: str,
        description: str,
        assignee_user_id: str | None = None,
        priority: Priority = Priority.MEDIUM,
        due_date: date | None = None,
        tags: Iterable[str] = (),
    ) -> Task:
        """Create a task in TODO status.

        Args:
            creator_id: Admin ID, or "self" for member-created tasks
            title: Task title (required, at most 200 characters)
            description: Task description (required, at most 2000 characters)
            assignee_user_id: Member to assign the task to
            priority: Task priority
            due_date: Calendar due date
            tags: Ordered tags, each non-empty

        Returns:
            The created task

        Raises:
            ValidationError: If a field is empty or too long
        """
        with span("task_service.create_task"):
            now = self._clock.now()
            task = Task(
                id=str(uuid.uuid4()),
                title=validate_title(title),
                description=validate_description(description),
                status=TaskStatus.TODO,
                assignee_user_id=assignee_user_id or None,
                created_by_admin_id=creator_id,
                priority=priority,
                due_date=due_date,
                tags=validate_tags(tags),
                created_at=now,
                updated_at=now,
            )
            created = await self._tasks.create(task)
            logger.info("Created task %s by %s", created.id, creator_id)

            effects = [
                ActivityEffect(created.id, ActivityType.TASK_CREATED, f'Task "{created.title}" created', creator_id)
            ]
            if created.assignee_user_id:
                effects.append(
                    ActivityEffect(
                        created.id, ActivityType.TASK_ASSIGNED, assignment_message(created.assignee_user_id), creator_id
                    )
                )
            await self._activity_service.apply_effects(effects)
            return created

    async def create_task_as_member(self, *, member_id: str, title: str, description: str) -> Task:
        """Create a task for the member themselves with default priority, no due date and no tags."""
        with span("task_service.create_task_as_member"):
            return await self.create_task(
                creator_id=Constants.SELF_CREATED_BY,
                title=title,
                description=description,
                assignee_user_id=member_id,
            )

    async def update_task_as_admin(self, *, task_id: str, patch: TaskPatch, actor_user_id: str) -> Task | None:
        """Apply the fields set on `patch` and record one activity per tracked change.

        Returns:
            The updated task, or None if it does not exist

        Raises:
            ValidationError: If a provided field is invalid
        """
        with span("task_service.update_task_as_admin"):
            changes = _validate_patch(patch.changes())

            existing = await self._tasks.find_by_id(task_id)
            if existing is None:
                return None

            updated = await self._tasks.update(task_id, {**changes, "updated_at": self._clock.now()})
            if updated is None:
                return None

            logger.info("Updated task %s fields %s", task_id, sorted(changes))
            await self._activity_service.apply_effects(task_change_effects(existing, updated, changes, actor_user_id))
            return updated

    async def assign_task(self, *, task_id: str, assignee_user_id: str | None, actor_user_id: str) -> Task | None:
        """Assign (or with None, unassign) a task. Always records the assignment."""
        with span("task_service.assign_task"):
            assignee = assignee_user_id or None
            updated = await self._tasks.update(
                task_id, {"assignee_user_id": assignee, "updated_at": self._clock.now()}
            )
            if updated is None:
                return None

            await self._activity_service.apply_effects(
                [ActivityEffect(task_id, ActivityType.TASK_ASSIGNED, assignment_message(assignee), actor_user_id)]
            )
            return updated

    async def update_task_status_as_member(self, *, task_id: str, member_id: str, status: TaskStatus) -> Task | None:
        """Change the status of a task assigned to the member.

        Returns:
            The updated task, or None if it does not exist

        Raises:
            ForbiddenError: If the task is not assigned to the member
        """
        with span("task_service.update_task_status_as_member"):
            task = await self._tasks.find_by_id(task_id)
            if task is None:
                return None
            ensure_assignee(task, member_id, action="update status of")

            updated = await self._tasks.update(task_id, {"status": status, "updated_at": self._clock.now()})
            if updated is None:
                return None

            await self._activity_service.apply_effects(
                [ActivityEffect(task_id, ActivityType.TASK_STATUS_CHANGED, f"Status changed to {status}", member_id)]
            )
            return updated

    async def complete_task(self, *, task_id: str, member_id: str) -> TaskCompletion:
        """Mark a task DONE, first stopping the member's timer if it runs on this task.

        Raises:
            NotFoundError: If the task does not exist
            ForbiddenError: If the task is not assigned to the member
        """
        with span("task_service.complete_task"):
            task = await load_task(self._tasks, task_id)
            ensure_assignee(task, member_id, action="complete")

            stopped_entry = None
            active = await self._time_entry_service.get_active_time_entry(user_id=member_id)
            if active is not None and active.task_id == task_id:
                stopped_entry = await self._time_entry_service.stop_time_entry(
                    user_id=member_id, time_entry_id=active.id
                )

            updated = await self._tasks.update(task_id, {"status": TaskStatus.DONE, "updated_at": self._clock.now()})
            if updated is None:
                msg = "Task not found"
                raise NotFoundError(msg)

            logger.info("Task %s completed by %s", task_id, member_id)
            await self._activity_service.apply_effects(
                [ActivityEffect(task_id, ActivityType.TASK_STATUS_CHANGED, "Task completed", member_id)]
            )
            return TaskCompletion(task=updated, stopped_time_entry=stopped_entry)

    async def get_task(self, *, task_id: str, user_id: str, role: UserRole) -> Task:
        with span("task_service.get_task"):
            return await load_task_for_user(self._tasks, task_id=task_id, user_id=user_id, role=role, action="view")

    async def list_tasks_for_admin(self, *, filters: TaskFilters | None = None) -> list[Task]:
        with span("task_service.list_tasks_for_admin"):
            if filters is None or filters.is_empty():
                return await self._tasks.list_all()
            return await self._tasks.search_and_filter(filters)

    async def list_tasks_for_member(self, *, member_id: str, filters: TaskFilters | None = None) -> list[Task]:
        """Tasks assigned to the member; any assignee filter the caller sent is overridden."""
        with span("task_service.list_tasks_for_member"):
            if filters is None or filters.is_empty():
                return await self._tasks.list_by_assignee(member_id)
            return await self._tasks.search_and_filter(filters.for_assignee(member_id))
