"""Comment service for task discussions."""

import logging
import uuid

from taskclock.core.clock import Clock
from taskclock.core.logging import span
from taskclock.domain.activity import ActivityType
from taskclock.domain.comment import Comment
from taskclock.domain.user import UserRole
from taskclock.domain.validators import validate_comment_text
from taskclock.repositories.base import CommentRepository, TaskRepository
from taskclock.services.access_control import load_task_for_user
from taskclock.services.activity_service import ActivityEffect, ActivityService


logger = logging.getLogger(__name__)


class CommentService:
    def __init__(
        self,
        *,
        comments: CommentRepository,
        tasks: TaskRepository,
        activity_service: ActivityService,
        clock: Clock,
    ) -> None:
        self._comments = comments
        self._tasks = tasks
        self._activity_service = activity_service
        self._clock = clock

    async def create_comment(self, *, task_id: str, user_id: str, role: UserRole, text: str) -> Comment:
        """Add a comment to a task.

        Admins may comment on any task; members only on tasks assigned to them.

        Raises:
            NotFoundError: If the task does not exist
            ForbiddenError: If a member comments on someone else's task
            ValidationError: If the trimmed text is empty or too long
        """
        with span("comment_service.create_comment"):
            await load_task_for_user(self._tasks, task_id=task_id, user_id=user_id, role=role, action="comment on")

            now = self._clock.now()
            comment = Comment(
                id=str(uuid.uuid4()),
                task_id=task_id,
                user_id=user_id,
                text=validate_comment_text(text),
                created_at=now,
                updated_at=now,
            )
            created = await self._comments.create(comment)
            logger.info("Comment %s added to task %s", created.id, task_id)

            await self._activity_service.apply_effects(
                [ActivityEffect(task_id, ActivityType.COMMENT_ADDED, "Added a comment", user_id)]
            )
            return created

    async def list_comments(self, *, task_id: str, user_id: str, role: UserRole) -> list[Comment]:
        """Comments on a task, oldest first."""
        with span("comment_service.list_comments"):
            await load_task_for_user(
                self._tasks, task_id=task_id, user_id=user_id, role=role, action="view comments on"
            )
            return await self._comments.find_by_task_id(task_id)
