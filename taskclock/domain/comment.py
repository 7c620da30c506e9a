"""Comment domain model."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Comment(BaseModel):
    """A note left on a task. Comments are never edited."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique comment ID")
    task_id: str = Field(..., description="ID of the task commented on")
    user_id: str = Field(..., description="ID of the author")
    text: str = Field(..., description="Trimmed comment text")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")
