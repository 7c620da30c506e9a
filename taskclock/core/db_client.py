"""SQLite database client wrapper with CRUD operations."""

import asyncio
import json
import logging
import re
import sqlite3
import threading
from collections.abc import Sequence
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any

import aiosqlite

from taskclock.core.config import settings


logger = logging.getLogger(__name__)

Condition = tuple[str, str, Any]

_IDENTIFIER = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


class DatabaseError(RuntimeError):
    """A database operation failed."""


class UniqueConstraintError(DatabaseError):
    """A write was rejected by a UNIQUE index or primary key.

    `columns` names the indexed columns SQLite reported, e.g. ("user_id",).
    """

    def __init__(self, message: str, columns: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.columns = columns


_UNIQUE_FAILED = "UNIQUE constraint failed: "


def _unique_columns(error: sqlite3.IntegrityError) -> tuple[str, ...] | None:
    """Columns of a UNIQUE violation, or None for other integrity failures (CHECK, NOT NULL)."""
    text = str(error)
    if not text.startswith(_UNIQUE_FAILED):
        return None
    return tuple(part.strip().rsplit(".", 1)[-1] for part in text.removeprefix(_UNIQUE_FAILED).split(","))


def _validate_identifier(name: str, kind: str = "collection") -> None:
    """Validate that a table or column name contains only alphanumeric characters and underscores."""
    if not _IDENTIFIER.match(name):
        msg = f"Invalid {kind} name: {name}. Only alphanumeric characters and underscores are allowed."
        raise ValueError(msg)


def get_db_path(db_path: str | None = None) -> Path:
    """Get the resolved SQLite database file path."""
    path_str = db_path or settings.sqlite_db_path
    return Path(path_str).resolve()


def to_db_value(value: Any) -> Any:
    """Convert a Python value to what is stored in SQLite.

    Datetimes are normalised to fixed-width UTC ISO strings so that string
    comparison in SQL matches chronological order.
    """
    if isinstance(value, datetime):
        return value.astimezone(UTC).isoformat(timespec="microseconds")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict | list | tuple):
        return json.dumps(list(value) if isinstance(value, tuple) else value)
    return value


def _get_sql_operator(op: str) -> str:
    """Map filter operator to SQL operator."""
    op_map = {
        "=": "=",
        "!=": "!=",
        ">": ">",
        "<": "<",
        ">=": ">=",
        "<=": "<=",
    }
    sql_op = op_map.get(op)
    if not sql_op:
        msg = f"Unsupported operator: {op}"
        raise ValueError(msg)
    return sql_op


def build_where(conditions: Sequence[Condition]) -> tuple[str, list[Any]]:
    """Turn (field, op, value) triples into a parameterised WHERE clause.

    A None value with "=" or "!=" becomes IS NULL / IS NOT NULL.
    """
    clauses = []
    params: list[Any] = []

    for field, op, value in conditions:
        _validate_identifier(field, "field")
        sql_op = _get_sql_operator(op)
        if value is None:
            if sql_op not in {"=", "!="}:
                msg = f"Operator {op} cannot compare with NULL"
                raise ValueError(msg)
            clauses.append(f"{field} IS NULL" if sql_op == "=" else f"{field} IS NOT NULL")
            continue
        clauses.append(f"{field} {sql_op} ?")
        params.append(to_db_value(value))

    return " AND ".join(clauses), params


_db_connections: dict[tuple[int, int, str], aiosqlite.Connection] = {}
_db_lock = threading.Lock()


async def get_connection(*, db_path: str | None = None) -> aiosqlite.Connection:
    """Get or create a cached connection for the current thread, loop, and db path."""
    thread_id = threading.get_ident()
    loop_id = id(asyncio.get_running_loop())
    path = get_db_path(db_path)
    cache_key = (thread_id, loop_id, str(path))

    cached_conn = _db_connections.get(cache_key)
    if cached_conn is not None:
        return cached_conn

    path.parent.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(str(path))
    conn.row_factory = aiosqlite.Row
    await conn.execute("PRAGMA foreign_keys = ON")
    await conn.execute("PRAGMA journal_mode = WAL")

    with _db_lock:
        # Another coroutine on this loop may have connected while we awaited.
        existing = _db_connections.setdefault(cache_key, conn)
    if existing is not conn:
        await conn.close()
        return existing

    logger.info(
        "Created new SQLite connection",
        extra={"db_path": str(path), "thread_id": thread_id, "loop_id": loop_id},
    )
    return conn


async def close_connection(*, db_path: str | None = None) -> None:
    """Close the cached SQLite connection for the current thread, loop, and db path."""
    thread_id = threading.get_ident()
    loop_id = id(asyncio.get_running_loop())
    path = get_db_path(db_path)
    cache_key = (thread_id, loop_id, str(path))

    with _db_lock:
        conn = _db_connections.pop(cache_key, None)
    if conn is None:
        return

    try:
        await conn.close()
        logger.info(
            "Closed SQLite connection",
            extra={"thread_id": thread_id, "loop_id": loop_id, "db_path": str(path)},
        )
    except Exception as e:
        logger.warning(
            "Error closing SQLite connection",
            extra={"error": str(e), "thread_id": thread_id, "loop_id": loop_id},
        )


async def init_db(*, db_path: str | None = None) -> None:
    """Initialize the database schema by delegating to schema.init_db()."""
    from taskclock.core import schema  # noqa: PLC0415 - schema imports this module

    await schema.init_db(db_path=db_path)


async def create_record(*, collection: str, data: dict[str, Any], db_path: str | None = None) -> dict[str, Any]:
    """Insert a new record and return it as stored."""
    _validate_identifier(collection)
    for key in data:
        _validate_identifier(key, "field")

    columns_str = ", ".join(data)
    placeholders_str = ", ".join("?" for _ in data)
    values = [to_db_value(value) for value in data.values()]

    try:
        conn = await get_connection(db_path=db_path)
        query = f"INSERT INTO {collection} ({columns_str}) VALUES ({placeholders_str})"  # noqa: S608
        await conn.execute(query, values)
        await conn.commit()
    except sqlite3.IntegrityError as e:
        logger.warning("create_record_constraint_violation", extra={"collection": collection, "error": str(e)})
        msg = f"Constraint violation in {collection}: {e}"
        columns = _unique_columns(e)
        if columns is None:
            raise DatabaseError(msg) from e
        raise UniqueConstraintError(msg, columns) from e
    except Exception as e:
        logger.error("create_record_failed", extra={"collection": collection, "error": str(e)})
        msg = f"Failed to create record in {collection}: {e}"
        raise DatabaseError(msg) from e

    logger.info("Created record", extra={"collection": collection, "record_id": data.get("id")})
    record = await get_record(collection=collection, record_id=str(data["id"]), db_path=db_path)
    if record is None:
        msg = f"Record vanished after insert in {collection}: {data['id']}"
        raise DatabaseError(msg)
    return record


async def get_record(*, collection: str, record_id: str, db_path: str | None = None) -> dict[str, Any] | None:
    """Fetch a single record by ID, or None if it does not exist."""
    _validate_identifier(collection)
    try:
        conn = await get_connection(db_path=db_path)
        query = f"SELECT * FROM {collection} WHERE id = ?"  # noqa: S608
        cursor = await conn.execute(query, (record_id,))
        row = await cursor.fetchone()
    except Exception as e:
        logger.error("get_record_failed", extra={"collection": collection, "record_id": record_id, "error": str(e)})
        msg = f"Failed to get record from {collection}: {e}"
        raise DatabaseError(msg) from e

    return dict(row) if row is not None else None


async def update_record(
    *, collection: str, record_id: str, data: dict[str, Any], db_path: str | None = None
) -> dict[str, Any] | None:
    """Update a record by ID and return it, or None if no such record exists."""
    if not data:
        msg = "Empty update payload"
        raise ValueError(msg)

    _validate_identifier(collection)
    for key in data:
        _validate_identifier(key, "field")

    set_clause = ", ".join(f"{key} = ?" for key in data)
    values = [to_db_value(value) for value in data.values()]
    values.append(record_id)

    try:
        conn = await get_connection(db_path=db_path)
        query = f"UPDATE {collection} SET {set_clause} WHERE id = ?"  # noqa: S608
        cursor = await conn.execute(query, values)
        await conn.commit()
    except Exception as e:
        logger.error("update_record_failed", extra={"collection": collection, "record_id": record_id, "error": str(e)})
        msg = f"Failed to update record in {collection}: {e}"
        raise DatabaseError(msg) from e

    if cursor.rowcount == 0:
        return None

    logger.info("Updated record", extra={"collection": collection, "record_id": record_id})
    return await get_record(collection=collection, record_id=record_id, db_path=db_path)


async def increment_field(
    *, collection: str, record_id: str, field: str, data: dict[str, Any] | None = None, db_path: str | None = None
) -> dict[str, Any] | None:
    """Atomically add one to an integer column (NULL counts as zero), setting `data` alongside."""
    _validate_identifier(collection)
    _validate_identifier(field, "field")
    extra = data or {}
    for key in extra:
        _validate_identifier(key, "field")

    assignments = [f"{field} = COALESCE({field}, 0) + 1", *(f"{key} = ?" for key in extra)]
    values = [to_db_value(value) for value in extra.values()]
    values.append(record_id)

    try:
        conn = await get_connection(db_path=db_path)
        query = f"UPDATE {collection} SET {', '.join(assignments)} WHERE id = ?"  # noqa: S608
        cursor = await conn.execute(query, values)
        await conn.commit()
    except Exception as e:
        logger.error(
            "increment_field_failed", extra={"collection": collection, "record_id": record_id, "error": str(e)}
        )
        msg = f"Failed to increment {field} in {collection}: {e}"
        raise DatabaseError(msg) from e

    if cursor.rowcount == 0:
        return None
    return await get_record(collection=collection, record_id=record_id, db_path=db_path)


async def list_records(
    *,
    collection: str,
    conditions: Sequence[Condition] = (),
    sort: str = "",
    db_path: str | None = None,
) -> list[dict[str, Any]]:
    """List records matching every condition, optionally ordered by one column."""
    _validate_identifier(collection)

    where_clause, params = build_where(conditions)
    where_sql = f"WHERE {where_clause}" if where_clause else ""

    # Only allow: column_name [ASC|DESC]; default is insertion order.
    order_sql = "ORDER BY rowid ASC"
    if sort:
        if re.match(r"^[A-Za-z_][A-Za-z0-9_]*(\s+(ASC|DESC))?$", sort.strip(), re.IGNORECASE):
            direction = "DESC" if sort.strip().upper().endswith(" DESC") else "ASC"
            order_sql = f"ORDER BY {sort.strip()}, rowid {direction}"
        else:
            logger.warning("Invalid sort parameter, using default", extra={"sort": sort})

    try:
        conn = await get_connection(db_path=db_path)
        query = f"SELECT * FROM {collection} {where_sql} {order_sql}"  # noqa: S608
        cursor = await conn.execute(query, params)
        rows = await cursor.fetchall()
    except Exception as e:
        logger.error("list_records_failed", extra={"collection": collection, "error": str(e)})
        msg = f"Failed to list records from {collection}: {e}"
        raise DatabaseError(msg) from e

    logger.debug("Listed records", extra={"collection": collection, "count": len(rows)})
    return [dict(row) for row in rows]


async def get_first_record(
    *, collection: str, conditions: Sequence[Condition], db_path: str | None = None
) -> dict[str, Any] | None:
    """Return the first record (in insertion order) matching the conditions, or None."""
    records = await list_records(collection=collection, conditions=conditions, db_path=db_path)
    return records[0] if records else None
