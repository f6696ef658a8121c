"""
db/connection.py
----------------
Manages the PostgreSQL connection pool.
Uses psycopg_pool's AsyncConnectionPool so callers suspend instead of
blocking while a statement is in flight.
"""

from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Callable, Optional, Sequence

from psycopg import AsyncConnection, AsyncRawCursor
from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool

from config import (
    DATABASE_URL,
    DB_POOL_MAX,
    DB_POOL_MIN,
    DB_POOL_TIMEOUT,
    DB_SSL_REQUIRED,
)
from db.errors import StoreConnectionError
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class RowSet:
    """Result of a single statement: rows as dicts plus the affected row count."""
    rows: list[dict[str, Any]] = field(default_factory=list)
    rowcount: int = 0


class Connection:
    """A pooled connection, exclusively owned by one caller until released."""

    def __init__(self, conn: AsyncConnection):
        self._conn = conn

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> RowSet:
        """
        Execute one statement written in PostgreSQL's native `$n` syntax.

        Args:
            sql: Statement with `$1`, `$2`, ... placeholders.
            params: Values bound to the placeholders, in order.

        Returns:
            A RowSet. Statements without a result set yield no rows.
        """
        # The raw cursor sends `$n` placeholders to the server untouched.
        async with AsyncRawCursor(self._conn, row_factory=dict_row) as cur:
            await cur.execute(sql, list(params))
            rows = await cur.fetchall() if cur.description is not None else []
            return RowSet(rows=rows, rowcount=cur.rowcount)


def _log_connect() -> None:
    logger.info("Connected to PostgreSQL.")


def _log_error(err: Exception) -> None:
    logger.error(f"PostgreSQL pool error: {err}")


class PostgresPool:
    """
    Bounded pool of PostgreSQL connections with an explicit lifecycle.

    Open it once at startup, close it at shutdown. Acquisitions beyond
    `max_size` wait in the pool's queue until a connection frees up or
    `timeout` seconds pass.
    """

    def __init__(
        self,
        conninfo: str = DATABASE_URL,
        min_size: int = DB_POOL_MIN,
        max_size: int = DB_POOL_MAX,
        timeout: float = DB_POOL_TIMEOUT,
        ssl_required: bool = DB_SSL_REQUIRED,
        on_connect: Callable[[], None] = _log_connect,
        on_error: Callable[[Exception], None] = _log_error,
    ):
        self.conninfo = conninfo
        self.min_size = min_size
        self.max_size = max_size
        self.timeout = timeout
        self.ssl_required = ssl_required
        self.on_connect = on_connect
        self.on_error = on_error
        self._pool: Optional[AsyncConnectionPool] = None

    @property
    def is_open(self) -> bool:
        return self._pool is not None

    async def open(self) -> None:
        """
        Open the pool and wait until `min_size` connections are ready.

        Raises:
            StoreConnectionError: If the database is unreachable.
        """
        if self._pool is not None:
            return
        kwargs = {"sslmode": "require"} if self.ssl_required else {}
        pool = AsyncConnectionPool(
            self.conninfo,
            min_size=self.min_size,
            max_size=self.max_size,
            timeout=self.timeout,
            kwargs=kwargs,
            configure=self._configure,
            reconnect_failed=self._reconnect_failed,
            open=False,
        )
        try:
            await pool.open(wait=True, timeout=self.timeout)
        except Exception as e:
            self.on_error(e)
            await pool.close()
            raise StoreConnectionError(f"Failed to open database pool: {e}", e) from e
        self._pool = pool
        logger.info(
            f"Database connection pool initialized (min={self.min_size}, max={self.max_size})."
        )

    async def close(self) -> None:
        """Close all connections in the pool."""
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            logger.info("Database connection pool closed.")

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[Connection]:
        """
        Check out a connection for the duration of the `async with` block.

        The checkout is one transaction: committed when the block exits
        normally, rolled back when it raises. The connection goes back to
        the pool on every exit path, cancellation included.

        Raises:
            StoreConnectionError: If the pool has not been opened.
        """
        if self._pool is None:
            raise StoreConnectionError("Database pool not initialized. Call open() first.")
        async with self._pool.connection() as conn:
            yield Connection(conn)

    def status(self) -> dict:
        """Pool statistics, for monitoring."""
        if self._pool is None:
            return {"initialized": False, "min_size": self.min_size, "max_size": self.max_size}
        return {"initialized": True, **self._pool.get_stats()}

    async def _configure(self, conn: AsyncConnection) -> None:
        self.on_connect()

    def _reconnect_failed(self, pool: AsyncConnectionPool) -> None:
        self.on_error(StoreConnectionError(f"Pool '{pool.name}' could not reconnect."))
