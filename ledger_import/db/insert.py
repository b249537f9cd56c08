from __future__ import annotations

import asyncio
import itertools
import logging
import re
from collections.abc import Callable, Mapping
from typing import Any

import psycopg2

from .records import prepare_record

"""Insert-one adapters handed to the import executor.

make_pg_insert_one(): one INSERT ... RETURNING per record on a psycopg2
cursor, run in a worker thread so the event loop keeps going between rows.
The connection is expected in autocommit mode: each row is its own
transaction, a failing row leaves the others untouched.

make_dry_run_insert_one(): no database; hands out sequential ids.
"""

__all__ = [
    "RecordInsertError",
    "insert_record",
    "make_pg_insert_one",
    "make_dry_run_insert_one",
]

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class RecordInsertError(Exception):
    pass


def _quote(identifier: str) -> str:
    if not _IDENTIFIER.match(identifier):
        raise RecordInsertError(f"invalid identifier: {identifier!r}")
    return f'"{identifier}"'


def insert_record(cursor: Any, table: str, record: Mapping[str, Any], returning: str | None = "id") -> Any:
    """INSERT one record; returns the RETURNING value (or None without returning)."""
    if not record:
        raise RecordInsertError("empty record")
    columns = list(record.keys())
    cols_sql = ",".join(_quote(c) for c in columns)
    placeholders = ",".join(["%s"] * len(columns))
    sql = f"INSERT INTO {_quote(table)} ({cols_sql}) VALUES ({placeholders})"
    if returning:
        sql += f" RETURNING {_quote(returning)}"
    try:
        cursor.execute(sql, [record[c] for c in columns])
        if not returning:
            return None
        row = cursor.fetchone()
    except psycopg2.Error as e:
        raise RecordInsertError(str(e).strip()) from e
    return row[0] if row else None


def make_pg_insert_one(
    cursor: Any,
    table: str,
    *,
    entity: str | None = None,
    returning: str | None = "id",
) -> Callable[[dict[str, Any]], Any]:
    """Build the async insert-one operation for `table`.

    entity selects the record builder applied before the INSERT
    (defaults to the table name).
    """
    builder_key = entity or table

    async def insert_one(values: dict[str, Any]) -> Any:
        record = prepare_record(builder_key, values)
        return await asyncio.to_thread(insert_record, cursor, table, record, returning)

    return insert_one


def make_dry_run_insert_one(entity: str = "") -> Callable[[dict[str, Any]], Any]:
    """Insert-one stand-in for runs without a database: logs and returns 1, 2, 3, ..."""
    counter = itertools.count(1)

    async def insert_one(values: dict[str, Any]) -> Any:
        record = prepare_record(entity, values)
        record_id = next(counter)
        logger.debug("dry-run insert entity=%s id=%d record=%s", entity, record_id, record)
        return record_id

    return insert_one
