"""Role and ownership guards shared by the services."""

import logging

from taskclock.core.errors import ForbiddenError, NotFoundError
from taskclock.domain.task import Task
from taskclock.domain.user import UserRole
from taskclock.repositories.base import TaskRepository


logger = logging.getLogger(__name__)


def ensure_assignee(task: Task, user_id: str, *, action: str) -> None:
    """Raise ForbiddenError unless the task is assigned to `user_id` (unassigned tasks fail too)."""
    if task.assignee_user_id != user_id:
        msg = f"Forbidden: You can only {action} tasks assigned to you"
        logger.warning("Ownership check failed", extra={"task_id": task.id, "user_id": user_id, "action": action})
        raise ForbiddenError(msg)


async def load_task(tasks: TaskRepository, task_id: str) -> Task:
    """Fetch a task the operation depends on, raising NotFoundError if it is missing."""
    task = await tasks.find_by_id(task_id)
    if task is None:
        msg = "Task not found"
        raise NotFoundError(msg)
    return task


async def load_task_for_user(
    tasks: TaskRepository,
    *,
    task_id: str,
    user_id: str,
    role: UserRole,
    action: str,
) -> Task:
    """Fetch a task, letting admins through and requiring members to be the assignee."""
    task = await load_task(tasks, task_id)
    if role != UserRole.ADMIN:
        ensure_assignee(task, user_id, action=action)
    return task
