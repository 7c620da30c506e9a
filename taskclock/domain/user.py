"""User domain models and enums."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class UserRole(StrEnum):
    """User role."""

    ADMIN = "ADMIN"
    MEMBER = "MEMBER"


class User(BaseModel):
    """User data transfer object."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="User ID issued by the identity provider")
    email: str = Field(default="", description="Email address")
    display_name: str = Field(default="", description="Display name")
    role: UserRole = Field(default=UserRole.MEMBER, description="User role")
    streak_count: int | None = Field(default=None, description="Consecutive-day streak counter")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")
