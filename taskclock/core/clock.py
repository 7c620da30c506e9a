"""Time source used by the services."""

from datetime import UTC, date, datetime, time, tzinfo
from typing import Protocol
from zoneinfo import ZoneInfo


class Clock(Protocol):
    """Anything that can tell the current time."""

    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(UTC)


def resolve_timezone(name: str | None) -> tzinfo | None:
    """Turn a configured IANA name into a tzinfo (None means server local time)."""
    return ZoneInfo(name) if name else None


def start_of_local_day(moment: datetime, tz: tzinfo | None = None) -> datetime:
    """Midnight of the day containing `moment`, in `tz` (server local time if None)."""
    local = moment.astimezone(tz)
    return local.replace(hour=0, minute=0, second=0, microsecond=0)


def local_day_bounds(day: date, tz: tzinfo | None = None) -> tuple[datetime, datetime]:
    """First and last instant of a calendar day, in `tz` (server local time if None)."""
    if tz is None:
        return datetime.combine(day, time.min).astimezone(), datetime.combine(day, time.max).astimezone()
    return datetime.combine(day, time.min, tzinfo=tz), datetime.combine(day, time.max, tzinfo=tz)
