"""Wires repositories, clock and time zone into one service graph."""

from dataclasses import dataclass
from datetime import tzinfo

from taskclock.core.clock import Clock, SystemClock, resolve_timezone
from taskclock.core.config import Settings, settings
from taskclock.repositories import Repositories, memory_repositories, sqlite_repositories
from taskclock.services.activity_service import ActivityService
from taskclock.services.comment_service import CommentService
from taskclock.services.report_service import ReportService
from taskclock.services.task_service import TaskService
from taskclock.services.time_entry_service import TimeEntryService
from taskclock.services.user_service import UserService


@dataclass(frozen=True)
class Services:
    repositories: Repositories
    activities: ActivityService
    time_entries: TimeEntryService
    tasks: TaskService
    comments: CommentService
    reports: ReportService
    users: UserService
    tz: tzinfo | None = None


def build_services(repositories: Repositories, *, clock: Clock | None = None, tz: tzinfo | None = None) -> Services:
    """Build every service over the given repositories."""
    clock = clock or SystemClock()
    activity_service = ActivityService(activities=repositories.activities, tasks=repositories.tasks, clock=clock)
    time_entry_service = TimeEntryService(
        time_entries=repositories.time_entries,
        tasks=repositories.tasks,
        activity_service=activity_service,
        clock=clock,
        tz=tz,
    )
    return Services(
        repositories=repositories,
        activities=activity_service,
        time_entries=time_entry_service,
        tasks=TaskService(
            tasks=repositories.tasks,
            activity_service=activity_service,
            time_entry_service=time_entry_service,
            clock=clock,
        ),
        comments=CommentService(
            comments=repositories.comments,
            tasks=repositories.tasks,
            activity_service=activity_service,
            clock=clock,
        ),
        reports=ReportService(time_entries=repositories.time_entries),
        users=UserService(users=repositories.users, clock=clock),
        tz=tz,
    )


def build_services_from_settings(app_settings: Settings = settings) -> Services:
    """Service graph for the configured storage backend and time zone."""
    if app_settings.storage_backend == "memory":
        repositories = memory_repositories()
    else:
        repositories = sqlite_repositories(db_path=app_settings.sqlite_db_path)
    return build_services(repositories, tz=resolve_timezone(app_settings.timezone))
