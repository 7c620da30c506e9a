"""Domain models and DTOs."""

from taskclock.domain.activity import Activity, ActivityType
from taskclock.domain.comment import Comment
from taskclock.domain.create_models import CommentCreate, TaskCreate, TimeEntryStart, TimeEntryStop
from taskclock.domain.filters import TaskFilters
from taskclock.domain.task import Priority, Task, TaskStatus
from taskclock.domain.time_entry import TimeEntry
from taskclock.domain.update_models import TaskAssign, TaskPatch, TaskStatusUpdate, UserRoleUpdate
from taskclock.domain.user import User, UserRole


__all__ = [
    "Activity",
    "ActivityType",
    "Comment",
    "CommentCreate",
    "Priority",
    "Task",
    "TaskAssign",
    "TaskCreate",
    "TaskFilters",
    "TaskPatch",
    "TaskStatus",
    "TaskStatusUpdate",
    "TimeEntry",
    "TimeEntryStart",
    "TimeEntryStop",
    "User",
    "UserRole",
    "UserRoleUpdate",
]
