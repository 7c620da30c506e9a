from taskclock.services.activity_service import ActivityEffect, ActivityService
from taskclock.services.comment_service import CommentService
from taskclock.services.container import Services, build_services, build_services_from_settings
from taskclock.services.report_service import ReportService
from taskclock.services.task_service import TaskService
from taskclock.services.time_entry_service import TimeEntryService
from taskclock.services.user_service import UserService


__all__ = [
    "ActivityEffect",
    "ActivityService",
    "CommentService",
    "ReportService",
    "Services",
    "TaskService",
    "TimeEntryService",
    "UserService",
    "build_services",
    "build_services_from_settings",
]
