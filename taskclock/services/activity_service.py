"""Activity log service: the audit trail written alongside task and timer changes."""

import logging
import uuid
from collections.abc import Iterable
from dataclasses import dataclass

from taskclock.core.clock import Clock
from taskclock.core.logging import span
from taskclock.domain.activity import Activity, ActivityType
from taskclock.domain.user import UserRole
from taskclock.repositories.base import ActivityRepository, TaskRepository
from taskclock.services.access_control import load_task_for_user


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActivityEffect:
    """An activity a state-changing operation wants recorded once it has succeeded."""

    task_id: str
    type: ActivityType
    message: str
    actor_user_id: str


class ActivityService:
    def __init__(self, *, activities: ActivityRepository, tasks: TaskRepository, clock: Clock) -> None:
        self._activities = activities
        self._tasks = tasks
        self._clock = clock

    async def create_activity(
        self,
        *,
        task_id: str,
        type: ActivityType,  # noqa: A002 - mirrors the Activity field
        message: str,
        actor_user_id: str,
    ) -> Activity:
        """Append an activity entry. No permission checks; callers are other services."""
        with span("activity_service.create_activity"):
            now = self._clock.now()
            activity = Activity(
                id=str(uuid.uuid4()),
                task_id=task_id,
                type=type,
                message=message,
                actor_user_id=actor_user_id,
                created_at=now,
                updated_at=now,
            )
            return await self._activities.create(activity)

    async def apply_effects(self, effects: Iterable[ActivityEffect]) -> list[Activity]:
        """Record each effect independently.

        A failed write is logged and skipped; it never undoes the change that
        produced the effect, and later effects are still attempted.

        Returns:
            The activities that were written
        """
        with span("activity_service.apply_effects"):
            written = []
            for effect in effects:
                try:
                    activity = await self.create_activity(
                        task_id=effect.task_id,
                        type=effect.type,
                        message=effect.message,
                        actor_user_id=effect.actor_user_id,
                    )
                except Exception as e:
                    logger.warning(
                        "Failed to record activity %s for task %s: %s",
                        effect.type,
                        effect.task_id,
                        e,
                        extra={"task_id": effect.task_id, "activity_type": effect.type},
                    )
                    continue
                written.append(activity)
            return written

    async def list_activities(self, *, task_id: str, user_id: str, role: UserRole) -> list[Activity]:
        """Activities on a task, newest first.

        Raises:
            NotFoundError: If the task does not exist
            ForbiddenError: If a member asks about a task not assigned to them
        """
        with span("activity_service.list_activities"):
            await load_task_for_user(
                self._tasks, task_id=task_id, user_id=user_id, role=role, action="view activities on"
            )
            return await self._activities.find_by_task_id(task_id)
