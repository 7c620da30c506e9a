"""Comment and activity routes nested under a task."""

from fastapi import APIRouter, Depends, status

from taskclock.domain.activity import Activity
from taskclock.domain.comment import Comment
from taskclock.domain.create_models import CommentCreate
from taskclock.domain.user import User
from taskclock.interface.dependencies import get_current_user, get_services
from taskclock.services.container import Services


router = APIRouter(prefix="/api/tasks/{task_id}", tags=["comments"])


@router.get("/comments")
async def list_comments(
    task_id: str,
    user: User = Depends(get_current_user),
    services: Services = Depends(get_services),
) -> list[Comment]:
    return await services.comments.list_comments(task_id=task_id, user_id=user.id, role=user.role)


@router.post("/comments", status_code=status.HTTP_201_CREATED)
async def create_comment(
    task_id: str,
    payload: CommentCreate,
    user: User = Depends(get_current_user),
    services: Services = Depends(get_services),
) -> Comment:
    return await services.comments.create_comment(task_id=task_id, user_id=user.id, role=user.role, text=payload.text)


@router.get("/activities")
async def list_activities(
    task_id: str,
    user: User = Depends(get_current_user),
    services: Services = Depends(get_services),
) -> list[Activity]:
    return await services.activities.list_activities(task_id=task_id, user_id=user.id, role=user.role)
