"""Time entry service: the per-user timer state machine.

An entry is created active on start and stopped exactly once. A user has at
most one active entry across all tasks.
"""

import logging
import uuid
from collections import defaultdict
from datetime import tzinfo

from taskclock.core.clock import Clock, start_of_local_day
from taskclock.core.errors import ConflictError, ForbiddenError
from taskclock.core.logging import log_event, span
from taskclock.domain.activity import ActivityType
from taskclock.domain.task import TaskStatus
from taskclock.domain.time_entry import TimeEntry
from taskclock.domain.validators import compute_duration_seconds, format_duration
from taskclock.models.service_models import TodaySummary
from taskclock.repositories.base import TaskRepository, TimeEntryRepository
from taskclock.services.access_control import ensure_assignee, load_task
from taskclock.services.activity_service import ActivityEffect, ActivityService


logger = logging.getLogger(__name__)

ACTIVE_ENTRY_EXISTS = "You already have an active time entry. Please stop it first."


class TimeEntryService:
    def __init__(
        self,
        *,
        time_entries: TimeEntryRepository,
        tasks: TaskRepository,
        activity_service: ActivityService,
        clock: Clock,
        tz: tzinfo | None = None,
    ) -> None:
        self._time_entries = time_entries
        self._tasks = tasks
        self._activity_service = activity_service
        self._clock = clock
        self._tz = tz

    async def start_time_entry(self, *, user_id: str, task_id: str) -> TimeEntry:
        """Start a timer on a task assigned to the caller.

        Raises:
            NotFoundError: If the task does not exist
            ForbiddenError: If the task is not assigned to the caller
            ConflictError: If the caller already has an active entry on any task
        """
        with span("time_entry_service.start_time_entry"):
            task = await load_task(self._tasks, task_id)
            ensure_assignee(task, user_id, action="start timer for")

            # Guard: one active entry per user; create_active rechecks atomically
            if await self._time_entries.find_active_by_user(user_id) is not None:
                raise ConflictError(ACTIVE_ENTRY_EXISTS)

            now = self._clock.now()
            entry = TimeEntry(
                id=str(uuid.uuid4()),
                task_id=task_id,
                user_id=user_id,
                start_time=now,
                created_at=now,
                updated_at=now,
            )
            created = await self._time_entries.create_active(entry)
            if created is None:
                raise ConflictError(ACTIVE_ENTRY_EXISTS)

            log_event(logger, "info", "Timer started", user_id=user_id, task_id=task_id)
            await self._activity_service.apply_effects(
                [ActivityEffect(task_id, ActivityType.TIMER_STARTED, "Started timer", user_id)]
            )
            return created

    async def stop_time_entry(self, *, user_id: str, time_entry_id: str) -> TimeEntry | None:
        """Stop the caller's active entry, computing its duration from the clock.

        Returns:
            The stopped entry, or None if no entry has that ID

        Raises:
            ForbiddenError: If the entry belongs to someone else
            ConflictError: If the entry is already stopped
            ValidationError: If the clock is not past the start time
        """
        with span("time_entry_service.stop_time_entry"):
            entry = await self._time_entries.find_by_id(time_entry_id)
            if entry is None:
                return None

            # Guard: ownership
            if entry.user_id != user_id:
                msg = "Forbidden: You can only stop your own time entries"
                raise ForbiddenError(msg)

            # Guard: stopped entries are terminal
            if not entry.is_active:
                msg = "Time entry is already stopped"
                raise ConflictError(msg)

            now = self._clock.now()
            duration_seconds = compute_duration_seconds(entry.start_time, now)
            stopped = await self._time_entries.update(
                time_entry_id,
                {"end_time": now, "duration_seconds": duration_seconds, "updated_at": now},
            )
            if stopped is None:
                return None

            log_event(
                logger,
                "info",
                "Timer stopped",
                user_id=user_id,
                task_id=entry.task_id,
                duration_seconds=duration_seconds,
            )
            await self._activity_service.apply_effects(
                [
                    ActivityEffect(
                        entry.task_id,
                        ActivityType.TIMER_STOPPED,
                        f"Stopped timer ({format_duration(duration_seconds)})",
                        user_id,
                    )
                ]
            )
            return stopped

    async def get_active_time_entry(self, *, user_id: str) -> TimeEntry | None:
        with span("time_entry_service.get_active_time_entry"):
            return await self._time_entries.find_active_by_user(user_id)

    async def get_today_summary(self, *, user_id: str) -> TodaySummary:
        """Tracked seconds since local midnight, per task and in total.

        Tasks count as completed today when they are assigned to the user, are
        DONE, and were last updated today.
        """
        with span("time_entry_service.get_today_summary"):
            now = self._clock.now()
            start_of_today = start_of_local_day(now, self._tz)

            per_task: dict[str, int] = defaultdict(int)
            for entry in await self._time_entries.list_completed_in_range(start_of_today, now):
                if entry.user_id != user_id or not entry.duration_seconds:
                    continue
                per_task[entry.task_id] += entry.duration_seconds

            assigned = await self._tasks.list_by_assignee(user_id)
            completed_today = sum(
                1 for task in assigned if task.status == TaskStatus.DONE and start_of_today <= task.updated_at <= now
            )

            return TodaySummary(
                total_today_seconds=sum(per_task.values()),
                per_task_today_seconds=dict(per_task),
                completed_tasks_today_count=completed_today,
            )

    async def list_time_entries_for_task(self, *, task_id: str, user_id: str) -> list[TimeEntry]:
        """The caller's own entries on a task, oldest first."""
        with span("time_entry_service.list_time_entries_for_task"):
            entries = await self._time_entries.find_by_task_and_user(task_id, user_id)
            return sorted(entries, key=lambda entry: entry.start_time)
