"""Pure validation helpers for task text, time ranges and durations.

Every helper raises `taskclock.core.errors.ValidationError` so services can
let the failure propagate unchanged to the caller.
"""

from collections.abc import Iterable
from datetime import datetime, timedelta

from taskclock.core.config import Constants
from taskclock.core.errors import ValidationError


_ONE_SECOND = timedelta(seconds=1)


def ensure_start_before_end(start: datetime, end: datetime) -> None:
    if start >= end:
        msg = "Start time must be before end time"
        raise ValidationError(msg)


def compute_duration_seconds(start: datetime, end: datetime) -> int:
    """Whole seconds elapsed between start and end, rounded down."""
    ensure_start_before_end(start, end)
    return (end - start) // _ONE_SECOND


def ensure_not_negative_duration(seconds: int) -> None:
    if seconds < 0:
        msg = "Duration cannot be negative"
        raise ValidationError(msg)


def format_duration(seconds: int) -> str:
    """Render a duration as "Xm Ys" (minutes are not folded into hours)."""
    ensure_not_negative_duration(seconds)
    minutes, remainder = divmod(seconds, 60)
    return f"{minutes}m {remainder}s"


def validate_date_range(from_: datetime, to: datetime) -> None:
    if from_ > to:
        msg = 'Invalid date range: "from" date must be before or equal to "to" date'
        raise ValidationError(msg)


def validate_title(title: str | None) -> str:
    if title is None or not title.strip():
        msg = "Title is required"
        raise ValidationError(msg)
    if len(title) > Constants.MAX_TITLE_LENGTH:
        msg = f"Title must be {Constants.MAX_TITLE_LENGTH} characters or less"
        raise ValidationError(msg)
    return title


def validate_description(description: str | None) -> str:
    if description is None or not description.strip():
        msg = "Description is required"
        raise ValidationError(msg)
    if len(description) > Constants.MAX_DESCRIPTION_LENGTH:
        msg = f"Description must be {Constants.MAX_DESCRIPTION_LENGTH} characters or less"
        raise ValidationError(msg)
    return description


def validate_tags(tags: Iterable[str] | None) -> tuple[str, ...]:
    """Check every tag is a non-empty string; keeps the caller's order."""
    if tags is None:
        msg = "Tags cannot be null"
        raise ValidationError(msg)
    normalized = tuple(tags)
    if any(not isinstance(tag, str) or not tag.strip() for tag in normalized):
        msg = "All tags must be non-empty strings"
        raise ValidationError(msg)
    return normalized


def validate_comment_text(text: str | None) -> str:
    """Return the trimmed comment text, or raise if it is empty or too long."""
    stripped = (text or "").strip()
    if not stripped:
        msg = "Comment text is required"
        raise ValidationError(msg)
    if len(stripped) > Constants.MAX_COMMENT_LENGTH:
        msg = f"Comment text must be {Constants.MAX_COMMENT_LENGTH} characters or less"
        raise ValidationError(msg)
    return stripped
