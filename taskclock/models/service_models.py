"""Pydantic models for service layer return types."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from taskclock.domain.task import Task
from taskclock.domain.time_entry import TimeEntry


class TaskCompletion(BaseModel):
    """Result of a member completing a task."""

    task: Task
    stopped_time_entry: TimeEntry | None = None


class TodaySummary(BaseModel):
    """A member's tracked time since local midnight."""

    total_today_seconds: int
    per_task_today_seconds: dict[str, int]
    completed_tasks_today_count: int


class UserTimeTotal(BaseModel):
    """Tracked time for one user within a report window."""

    user_id: str
    total_duration_seconds: int


class TimeReport(BaseModel):
    """Per-user tracked time totals, sorted by user ID."""

    model_config = ConfigDict(populate_by_name=True)

    from_: date = Field(..., alias="from", description="First day of the report window")
    to: date = Field(..., description="Last day of the report window")
    totals: list[UserTimeTotal]
