"""Activity log domain models for the task audit trail."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class ActivityType(StrEnum):
    """Kind of state change an activity records."""

    TASK_CREATED = "TASK_CREATED"
    TASK_ASSIGNED = "TASK_ASSIGNED"
    TASK_STATUS_CHANGED = "TASK_STATUS_CHANGED"
    TASK_PRIORITY_CHANGED = "TASK_PRIORITY_CHANGED"
    TASK_DUE_DATE_CHANGED = "TASK_DUE_DATE_CHANGED"
    TASK_TAGS_CHANGED = "TASK_TAGS_CHANGED"
    TIMER_STARTED = "TIMER_STARTED"
    TIMER_STOPPED = "TIMER_STOPPED"
    COMMENT_ADDED = "COMMENT_ADDED"


class Activity(BaseModel):
    """Activity entry data transfer object."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique activity ID")
    task_id: str = Field(..., description="ID of task this activity relates to")
    type: ActivityType = Field(..., description="Kind of change")
    message: str = Field(..., description="Human-readable description of the change")
    actor_user_id: str = Field(..., description="ID of user who performed the action")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")
