"""Time entry domain model."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TimeEntry(BaseModel):
    """A span of tracked work on a task.

    An entry is active while `end_time` is None. Stopping sets `end_time`
    and `duration_seconds` together; a stopped entry never changes again.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique time entry ID")
    task_id: str = Field(..., description="ID of the tracked task")
    user_id: str = Field(..., description="ID of the member tracking time")
    start_time: datetime = Field(..., description="When the timer was started")
    end_time: datetime | None = Field(default=None, description="When the timer was stopped")
    duration_seconds: int | None = Field(default=None, ge=0, description="Whole seconds between start and stop")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    @model_validator(mode="after")
    def check_stop_fields_paired(self) -> "TimeEntry":
        """end_time and duration_seconds are either both set or both empty."""
        if (self.end_time is None) != (self.duration_seconds is None):
            msg = "end_time and duration_seconds must be set together"
            raise ValueError(msg)
        return self

    @property
    def is_active(self) -> bool:
        return self.end_time is None
