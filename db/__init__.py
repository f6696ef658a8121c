"""
db/ - Database Layer
====================
Handles the PostgreSQL connection pool, schema initialization, and the
`run` / `get` / `all` query façade used by the repositories.
This layer is the lowest in the architecture and has no dependencies on other layers.
"""

from db.connection import Connection, PostgresPool, RowSet
from db.errors import (
    DatabaseError,
    ExecutionError,
    InitializationError,
    QueryError,
    StoreConnectionError,
)
from db.placeholders import to_native
from db.query import Database, Row, RunResult

__all__ = [
    "Connection",
    "Database",
    "DatabaseError",
    "ExecutionError",
    "InitializationError",
    "PostgresPool",
    "QueryError",
    "Row",
    "RowSet",
    "RunResult",
    "StoreConnectionError",
    "to_native",
]
