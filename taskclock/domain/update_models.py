"""Update models for partial task and user changes."""

from datetime import date

from pydantic import BaseModel, Field

from taskclock.domain.task import Priority, TaskStatus
from taskclock.domain.user import UserRole


class TaskPatch(BaseModel):
    """Partial task update.

    Only the fields present in `model_fields_set` are applied. Sending
    `assignee_user_id` or `due_date` as null clears them.
    """

    title: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
    assignee_user_id: str | None = None
    priority: Priority | None = None
    due_date: date | None = None
    tags: list[str] | None = None

    def changes(self) -> dict[str, object]:
        """Fields explicitly provided by the caller, including explicit nulls."""
        return self.model_dump(include=self.model_fields_set)


class TaskAssign(BaseModel):
    """Payload for (un)assigning a task."""

    assignee_user_id: str | None = Field(default=None, description="Member ID, or null to unassign")


class TaskStatusUpdate(BaseModel):
    """Payload for a member changing the status of their task."""

    status: TaskStatus


class UserRoleUpdate(BaseModel):
    """Payload for changing a user's role."""

    role: UserRole
