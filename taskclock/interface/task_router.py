"""Task routes: creation, listing, updates, assignment and completion."""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from taskclock.domain.create_models import TaskCreate
from taskclock.domain.filters import SORT_PARAM_FIELDS, SortOrder, SortParam, TaskFilters
from taskclock.domain.task import Priority, Task, TaskStatus
from taskclock.domain.time_entry import TimeEntry
from taskclock.domain.update_models import TaskAssign, TaskPatch, TaskStatusUpdate
from taskclock.domain.user import User, UserRole
from taskclock.interface.dependencies import get_current_user, get_services, require_admin, require_member
from taskclock.models.service_models import TaskCompletion
from taskclock.services.container import Services


router = APIRouter(prefix="/api/tasks", tags=["tasks"])


def _task_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_task(
    payload: TaskCreate,
    user: User = Depends(get_current_user),
    services: Services = Depends(get_services),
) -> Task:
    """Admins create fully specified tasks; members create tasks for themselves."""
    if user.role == UserRole.ADMIN:
        return await services.tasks.create_task(
            creator_id=user.id,
            title=payload.title,
            description=payload.description,
            assignee_user_id=payload.assignee_user_id,
            priority=payload.priority,
            due_date=payload.due_date,
            tags=payload.tags,
        )
    return await services.tasks.create_task_as_member(
        member_id=user.id, title=payload.title, description=payload.description
    )


@router.get("")
async def list_tasks(
    task_status: TaskStatus | None = Query(default=None, alias="status"),
    priority: Priority | None = Query(default=None),
    tag: str | None = Query(default=None),
    q: str | None = Query(default=None),
    sort_by: SortParam | None = Query(default=None, alias="sortBy"),
    sort_order: SortOrder | None = Query(default=None, alias="sortOrder"),
    assignee_user_id: str | None = Query(default=None, alias="assigneeUserId"),
    user: User = Depends(get_current_user),
    services: Services = Depends(get_services),
) -> list[Task]:
    filters = TaskFilters(
        status=task_status,
        priority=priority,
        tag=tag or None,
        search_query=q or None,
        sort_by=SORT_PARAM_FIELDS[sort_by] if sort_by else None,
        sort_order=sort_order,
        assignee_user_id=assignee_user_id or None,
    )
    if user.role == UserRole.ADMIN:
        return await services.tasks.list_tasks_for_admin(filters=filters)
    return await services.tasks.list_tasks_for_member(member_id=user.id, filters=filters)


@router.get("/{task_id}")
async def get_task(
    task_id: str,
    user: User = Depends(get_current_user),
    services: Services = Depends(get_services),
) -> Task:
    return await services.tasks.get_task(task_id=task_id, user_id=user.id, role=user.role)


@router.patch("/{task_id}")
async def update_task(
    task_id: str,
    patch: TaskPatch,
    admin: User = Depends(require_admin),
    services: Services = Depends(get_services),
) -> Task:
    task = await services.tasks.update_task_as_admin(task_id=task_id, patch=patch, actor_user_id=admin.id)
    if task is None:
        raise _task_not_found()
    return task


@router.post("/{task_id}/assign")
async def assign_task(
    task_id: str,
    payload: TaskAssign,
    admin: User = Depends(require_admin),
    services: Services = Depends(get_services),
) -> Task:
    task = await services.tasks.assign_task(
        task_id=task_id, assignee_user_id=payload.assignee_user_id, actor_user_id=admin.id
    )
    if task is None:
        raise _task_not_found()
    return task


@router.patch("/{task_id}/status")
async def update_task_status(
    task_id: str,
    payload: TaskStatusUpdate,
    member: User = Depends(require_member),
    services: Services = Depends(get_services),
) -> Task:
    task = await services.tasks.update_task_status_as_member(
        task_id=task_id, member_id=member.id, status=payload.status
    )
    if task is None:
        raise _task_not_found()
    return task


@router.post("/{task_id}/complete")
async def complete_task(
    task_id: str,
    member: User = Depends(require_member),
    services: Services = Depends(get_services),
) -> TaskCompletion:
    return await services.tasks.complete_task(task_id=task_id, member_id=member.id)


@router.get("/{task_id}/time-entries")
async def list_my_time_entries(
    task_id: str,
    member: User = Depends(require_member),
    services: Services = Depends(get_services),
) -> list[TimeEntry]:
    """The caller's own time entries on a task."""
    return await services.time_entries.list_time_entries_for_task(task_id=task_id, user_id=member.id)
