"""Pydantic models for creating records."""

from datetime import date

from pydantic import BaseModel, Field

from taskclock.domain.task import Priority


class TaskCreate(BaseModel):
    """Payload for creating a task.

    Members may only send title and description; everything else is ignored
    for them and the task is assigned to the caller.
    """

    title: str = Field(..., description="Task title")
    description: str = Field(default="", description="Detailed task description")
    assignee_user_id: str | None = Field(default=None, description="Member to assign the task to")
    priority: Priority = Field(default=Priority.MEDIUM, description="Task priority")
    due_date: date | None = Field(default=None, description="Calendar due date (YYYY-MM-DD)")
    tags: list[str] = Field(default_factory=list, description="Ordered tag list")


class CommentCreate(BaseModel):
    """Payload for adding a comment to a task."""

    text: str = Field(..., description="Comment text")


class TimeEntryStart(BaseModel):
    """Payload for starting a timer."""

    task_id: str = Field(..., min_length=1, description="Task to track time against")


class TimeEntryStop(BaseModel):
    """Payload for stopping a timer."""

    time_entry_id: str = Field(..., min_length=1, description="Active time entry to stop")
