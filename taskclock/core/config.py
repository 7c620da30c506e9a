"""Configuration management for taskclock."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage Configuration
    storage_backend: Literal["sqlite", "memory"] = Field(
        default="sqlite", description="Repository backend used by the HTTP app"
    )
    sqlite_db_path: str = Field(default="data/taskclock.db", description="SQLite database file path")

    # Time Configuration
    timezone: str | None = Field(
        default=None,
        description="IANA time zone used for the daily summary window (server local time when unset)",
    )

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Deployment environment name"
    )

    @property
    def is_production(self) -> bool:
        """Whether the app runs in production."""
        return self.environment == "production"


# Application Constants
class Constants:
    """Application-wide constants."""

    # Field limits
    MAX_TITLE_LENGTH: int = 200
    MAX_DESCRIPTION_LENGTH: int = 2000
    MAX_COMMENT_LENGTH: int = 2000

    # created_by_admin_id value for tasks a member creates for themselves
    SELF_CREATED_BY: str = "self"

    # HTTP Status Codes
    HTTP_BAD_REQUEST: int = 400
    HTTP_UNAUTHORIZED: int = 401
    HTTP_FORBIDDEN: int = 403
    HTTP_NOT_FOUND: int = 404
    HTTP_SERVER_ERROR: int = 500

    # Identity headers set by the authenticating gateway
    USER_ID_HEADER: str = "X-User-Id"
    USER_EMAIL_HEADER: str = "X-User-Email"
    USER_NAME_HEADER: str = "X-User-Name"


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
constants = Constants()
