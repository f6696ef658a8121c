"""
db/errors.py
------------
Error taxonomy of the database layer.

Store-native exceptions never leave this package untranslated: every failure
surfaces as one of the classes below, with the original exception kept on
``.cause`` and chained via ``raise ... from``. Nothing here retries.
"""

import psycopg
from psycopg_pool import PoolClosed, PoolTimeout


class DatabaseError(Exception):
    """Base class for all errors raised by the database layer."""


class QueryError(DatabaseError):
    """A façade call failed. Carries the underlying store error."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class StoreConnectionError(QueryError):
    """The pool could not supply a usable connection."""


class ExecutionError(QueryError):
    """The store rejected or failed to execute a statement."""


class InitializationError(DatabaseError):
    """Schema setup failed at startup. Fatal to the process."""


def translate_error(exc: BaseException) -> QueryError:
    """
    Map a store-native exception to the layer's taxonomy.

    Args:
        exc: Exception raised by psycopg or psycopg_pool.

    Returns:
        A StoreConnectionError for connectivity and pool failures,
        an ExecutionError for everything else.
    """
    if isinstance(exc, QueryError):
        return exc
    if isinstance(exc, (PoolTimeout, PoolClosed, psycopg.OperationalError)):
        return StoreConnectionError(f"Database connection failed: {exc}", exc)
    return ExecutionError(f"Statement failed: {exc}", exc)
