"""SQLite schema management (code-first approach)."""

import logging

from taskclock.core.db_client import get_connection


logger = logging.getLogger(__name__)


# Central list of all collections in the schema
COLLECTIONS = [
    "users",
    "tasks",
    "time_entries",
    "comments",
    "activities",
]


_TABLES = {
    "users": """
        CREATE TABLE IF NOT EXISTS users (
            id TEXT PRIMARY KEY,
            email TEXT NOT NULL DEFAULT '',
            display_name TEXT NOT NULL DEFAULT '',
            role TEXT NOT NULL CHECK (role IN ('ADMIN', 'MEMBER')),
            streak_count INTEGER,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
    """,
    "tasks": """
        CREATE TABLE IF NOT EXISTS tasks (
            id TEXT PRIMARY KEY,
            title TEXT NOT NULL,
            description TEXT NOT NULL,
            status TEXT NOT NULL CHECK (status IN ('TODO', 'IN_PROGRESS', 'DONE')),
            assignee_user_id TEXT,
            created_by_admin_id TEXT NOT NULL,
            priority TEXT NOT NULL CHECK (priority IN ('LOW', 'MEDIUM', 'HIGH')),
            due_date TEXT,
            tags TEXT NOT NULL DEFAULT '[]',
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
    """,
    "time_entries": """
        CREATE TABLE IF NOT EXISTS time_entries (
            id TEXT PRIMARY KEY,
            task_id TEXT NOT NULL,
            user_id TEXT NOT NULL,
            start_time TEXT NOT NULL,
            end_time TEXT,
            duration_seconds INTEGER CHECK (duration_seconds IS NULL OR duration_seconds >= 0),
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            CHECK ((end_time IS NULL) = (duration_seconds IS NULL))
        )
    """,
    "comments": """
        CREATE TABLE IF NOT EXISTS comments (
            id TEXT PRIMARY KEY,
            task_id TEXT NOT NULL,
            user_id TEXT NOT NULL,
            text TEXT NOT NULL,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
    """,
    "activities": """
        CREATE TABLE IF NOT EXISTS activities (
            id TEXT PRIMARY KEY,
            task_id TEXT NOT NULL,
            type TEXT NOT NULL,
            message TEXT NOT NULL,
            actor_user_id TEXT NOT NULL,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
    """,
}

_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_tasks_assignee ON tasks (assignee_user_id)",
    "CREATE INDEX IF NOT EXISTS idx_time_entries_user ON time_entries (user_id)",
    "CREATE INDEX IF NOT EXISTS idx_time_entries_task_user ON time_entries (task_id, user_id)",
    # At most one running timer per user.
    "CREATE UNIQUE INDEX IF NOT EXISTS idx_time_entries_one_active ON time_entries (user_id) WHERE end_time IS NULL",
    "CREATE INDEX IF NOT EXISTS idx_comments_task ON comments (task_id)",
    "CREATE INDEX IF NOT EXISTS idx_activities_task ON activities (task_id)",
]


async def init_db(*, db_path: str | None = None) -> None:
    """Create every table and index that does not exist yet."""
    conn = await get_connection(db_path=db_path)
    for collection in COLLECTIONS:
        await conn.execute(_TABLES[collection])
    for statement in _INDEXES:
        await conn.execute(statement)
    await conn.commit()
    logger.info("Schema initialized", extra={"collections": COLLECTIONS})
