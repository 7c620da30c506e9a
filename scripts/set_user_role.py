#!/usr/bin/env python3
"""Operator script to set a user's role, e.g. to bootstrap the first admin.

Usage:
    python scripts/set_user_role.py <user_id> [--role admin|member] [--email <email>] [--name <display name>]
"""

import asyncio
import logging
import sys

from taskclock.core.clock import SystemClock
from taskclock.core.config import settings
from taskclock.core.db_client import close_connection, init_db
from taskclock.domain.user import UserRole
from taskclock.repositories import sqlite_repositories
from taskclock.services.user_service import UserService


logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)


def _option(args: list[str], flag: str) -> str | None:
    if flag not in args:
        return None
    index = args.index(flag)
    if index + 1 >= len(args):
        logger.error("Missing value for %s", flag)
        sys.exit(1)
    return args[index + 1]


async def set_user_role(user_id: str, role: UserRole, *, email: str = "", display_name: str = "") -> None:
    """Create the user if needed, then store the requested role.

    Args:
        user_id: ID issued by the identity provider
        role: Role to assign
        email: Email used when the user is created
        display_name: Display name used when the user is created
    """
    db_path = settings.sqlite_db_path
    await init_db(db_path=db_path)
    try:
        repositories = sqlite_repositories(db_path=db_path)
        clock = SystemClock()
        user = await UserService(users=repositories.users, clock=clock).ensure_user(
            user_id=user_id, email=email, display_name=display_name
        )
        if user.role == role:
            logger.info("%s already has role %s", user_id, role)
            return

        # Operators bypass the admin-only guard, so write through the repository
        await repositories.users.update(user_id, {"role": role, "updated_at": clock.now()})
        logger.info("%s role changed from %s to %s", user_id, user.role, role)
    finally:
        await close_connection(db_path=db_path)


def print_usage() -> None:
    """Print usage information."""
    logger.info(__doc__)


async def main() -> None:
    """Main entry point."""
    args = sys.argv[1:]

    if not args or "--help" in args or "-h" in args:
        print_usage()
        return

    user_id = args[0]
    role_name = (_option(args, "--role") or "member").upper()
    if role_name not in UserRole.__members__:
        logger.error("Unknown role: %s", role_name.lower())
        sys.exit(1)

    await set_user_role(
        user_id,
        UserRole(role_name),
        email=_option(args, "--email") or "",
        display_name=_option(args, "--name") or "",
    )


if __name__ == "__main__":
    asyncio.run(main())
