"""User service for profiles, roles and streaks."""

import logging

from taskclock.core.clock import Clock
from taskclock.core.errors import ForbiddenError, NotFoundError
from taskclock.core.logging import span
from taskclock.domain.user import User, UserRole
from taskclock.repositories.base import UserRepository


logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, *, users: UserRepository, clock: Clock) -> None:
        self._users = users
        self._clock = clock

    async def ensure_user(self, *, user_id: str, email: str = "", display_name: str = "") -> User:
        """Return the stored user, creating it as a MEMBER on first sight.

        The stored role is the source of truth; identity claims never change it.
        """
        with span("user_service.ensure_user"):
            existing = await self._users.find_by_id(user_id)
            if existing is not None:
                return existing

            now = self._clock.now()
            user = await self._users.create(
                User(
                    id=user_id,
                    email=email,
                    display_name=display_name,
                    role=UserRole.MEMBER,
                    created_at=now,
                    updated_at=now,
                )
            )
            logger.info("Created user %s", user_id)
            return user

    async def get_user(self, *, user_id: str) -> User | None:
        with span("user_service.get_user"):
            return await self._users.find_by_id(user_id)

    async def update_user_role(self, *, actor_user_id: str, user_id: str, role: UserRole) -> User:
        """Change a user's role (admin-only at the boundary).

        Raises:
            NotFoundError: If the user does not exist
            ForbiddenError: If an admin tries to demote themselves
        """
        with span("user_service.update_user_role"):
            # Guard: admins cannot lock themselves out
            if actor_user_id == user_id and role != UserRole.ADMIN:
                msg = "Forbidden: You cannot remove your own admin role"
                logger.warning(msg)
                raise ForbiddenError(msg)

            updated = await self._users.update(user_id, {"role": role, "updated_at": self._clock.now()})
            if updated is None:
                msg = f"User {user_id} not found"
                raise NotFoundError(msg)

            logger.info("User %s role set to %s by %s", user_id, role, actor_user_id)
            return updated

    async def increment_streak(self, *, user_id: str) -> int:
        """Add one to the user's streak and return the new count.

        Raises:
            NotFoundError: If the user does not exist
        """
        with span("user_service.increment_streak"):
            updated = await self._users.increment_streak(user_id, self._clock.now())
            if updated is None:
                msg = f"User {user_id} not found"
                raise NotFoundError(msg)
            return updated.streak_count or 0
