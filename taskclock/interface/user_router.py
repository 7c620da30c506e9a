"""Profile, streak and role-management routes."""

from fastapi import APIRouter, Depends

from taskclock.domain.update_models import UserRoleUpdate
from taskclock.domain.user import User
from taskclock.interface.dependencies import get_current_user, get_services, require_admin
from taskclock.services.container import Services


auth_router = APIRouter(prefix="/api/auth", tags=["auth"])
admin_router = APIRouter(prefix="/api/admin", tags=["admin"])


@auth_router.get("/me")
async def get_me(user: User = Depends(get_current_user)) -> User:
    return user


@auth_router.post("/streak")
async def increment_streak(
    user: User = Depends(get_current_user),
    services: Services = Depends(get_services),
) -> dict[str, int]:
    streak_count = await services.users.increment_streak(user_id=user.id)
    return {"streak_count": streak_count}


@admin_router.post("/users/{target_user_id}/role")
async def update_user_role(
    target_user_id: str,
    payload: UserRoleUpdate,
    admin: User = Depends(require_admin),
    services: Services = Depends(get_services),
) -> User:
    return await services.users.update_user_role(actor_user_id=admin.id, user_id=target_user_id, role=payload.role)
