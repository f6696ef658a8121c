"""
db/query.py
-----------
The query façade: `run`, `get` and `all`.

Callers write statements with `?` markers and never touch the pool or
native syntax. Every call normalizes the statement, checks out one
connection, executes exactly one statement and releases the connection,
whatever the outcome.
"""

from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from typing import Any, Optional, Protocol, Sequence

import psycopg

from db.connection import Connection, RowSet
from db.errors import QueryError, translate_error
from db.placeholders import to_native
from utils.logger import get_logger

logger = get_logger(__name__)

Row = dict[str, Any]


class Pool(Protocol):
    """Anything that can lend out a Connection inside `async with`."""

    def acquire(self) -> AbstractAsyncContextManager[Connection]: ...


@dataclass(frozen=True)
class RunResult:
    """
    Outcome of a mutating statement.

    Attributes:
        insert_id: `id` of the first row returned by a RETURNING clause, else None.
        changes: Number of rows affected.
    """
    insert_id: Optional[int]
    changes: int


class Database:
    """Three-verb query interface over an injected connection pool."""

    def __init__(self, pool: Pool):
        self.pool = pool

    async def run(self, sql: str, params: Sequence[Any] = ()) -> RunResult:
        """
        Execute an INSERT, UPDATE or DELETE.

        Returns:
            RunResult with the returned `id` (if any) and the affected row count.

        Raises:
            QueryError: On any connection or execution failure. Never retried.
        """
        result = await self._execute(sql, params)
        first = result.rows[0] if result.rows else None
        return RunResult(
            insert_id=first.get("id") if first else None,
            changes=result.rowcount,
        )

    async def get(self, sql: str, params: Sequence[Any] = ()) -> Optional[Row]:
        """Return the first row of a SELECT, or None when nothing matches."""
        result = await self._execute(sql, params)
        return result.rows[0] if result.rows else None

    async def all(self, sql: str, params: Sequence[Any] = ()) -> list[Row]:
        """Return every row of a SELECT in the order the store produced them."""
        result = await self._execute(sql, params)
        return list(result.rows)

    async def _execute(self, sql: str, params: Sequence[Any]) -> RowSet:
        native_sql = to_native(sql)
        logger.debug(f"Executing: {' '.join(native_sql.split())} | params={list(params)}")
        try:
            async with self.pool.acquire() as conn:
                return await conn.execute(native_sql, params)
        except QueryError as e:
            logger.error(f"Query failed: {e}")
            raise
        except psycopg.Error as e:
            error = translate_error(e)
            logger.error(f"Query failed: {error}")
            raise error from e
