"""Task domain models and enums."""

from datetime import date, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class TaskStatus(StrEnum):
    """Task lifecycle status. Any status may follow any other."""

    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


class Priority(StrEnum):
    """Task priority."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class Task(BaseModel):
    """Task data transfer object."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique task ID")
    title: str = Field(..., description="Task title")
    description: str = Field(..., description="Detailed task description")
    status: TaskStatus = Field(default=TaskStatus.TODO, description="Current lifecycle status")
    assignee_user_id: str | None = Field(default=None, description="Assigned member ID")
    created_by_admin_id: str = Field(..., description="Creating admin ID, or 'self' for member-created tasks")
    priority: Priority = Field(default=Priority.MEDIUM, description="Task priority")
    due_date: date | None = Field(default=None, description="Calendar due date")
    tags: tuple[str, ...] = Field(default=(), description="Ordered tag list")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")
