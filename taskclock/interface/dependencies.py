"""FastAPI dependencies for the service graph, caller identity and role guards.

Identity is asserted by the authenticating gateway in front of the app via
the X-User-* headers. The role always comes from the stored user.
"""

import logging

from fastapi import Depends, Header, HTTPException, Request, status

from taskclock.core.config import constants
from taskclock.domain.user import User, UserRole
from taskclock.services.container import Services


logger = logging.getLogger(__name__)


def get_services(request: Request) -> Services:
    """Service graph attached to the application at startup."""
    return request.app.state.services


async def get_current_user(
    request: Request,
    user_id: str | None = Header(default=None, alias=constants.USER_ID_HEADER),
    email: str | None = Header(default=None, alias=constants.USER_EMAIL_HEADER),
    display_name: str | None = Header(default=None, alias=constants.USER_NAME_HEADER),
    services: Services = Depends(get_services),
) -> User:
    """Resolve the caller, creating their user record on first request."""
    if not user_id or not user_id.strip():
        logger.warning("auth_missing_identity", extra={"path": request.url.path})
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")

    return await services.users.ensure_user(
        user_id=user_id.strip(),
        email=email or "",
        display_name=display_name or "",
    )


def require_role(role: UserRole):  # noqa: ANN201 - returns a FastAPI dependency
    """Dependency factory rejecting callers whose stored role is not `role`."""

    async def dependency(user: User = Depends(get_current_user)) -> User:
        if user.role != role:
            logger.warning("auth_wrong_role", extra={"user_id": user.id, "required_role": role})
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Forbidden: {role.capitalize()} role required",
            )
        return user

    return dependency


require_admin = require_role(UserRole.ADMIN)
require_member = require_role(UserRole.MEMBER)
