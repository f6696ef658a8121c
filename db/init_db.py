"""
db/init_db.py
-------------
Creates the database schema (table and index) if they do not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

import asyncio

from db.errors import InitializationError
from utils.logger import get_logger

logger = get_logger(__name__)

CREATE_TABLE_SQL = """
    CREATE TABLE IF NOT EXISTS user_locations (
        id              SERIAL PRIMARY KEY,
        user_name       TEXT,
        latitude        REAL NOT NULL,
        longitude       REAL NOT NULL,
        timestamp       TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP,
        device_info     TEXT
    )
"""

# Keeps ORDER BY timestamp DESC and "today" range scans fast.
CREATE_INDEX_SQL = "CREATE INDEX IF NOT EXISTS idx_timestamp ON user_locations(timestamp)"

SCHEMA_STATEMENTS = (CREATE_TABLE_SQL, CREATE_INDEX_SQL)


async def create_tables(pool) -> None:
    """
    Create the `user_locations` table, then its timestamp index.
    Safe to call multiple times (uses IF NOT EXISTS).

    Args:
        pool: An opened PostgresPool (or anything exposing `acquire()`).

    Raises:
        InitializationError: If a connection cannot be acquired or either
            statement fails.
    """
    try:
        async with pool.acquire() as conn:
            for statement in SCHEMA_STATEMENTS:
                await conn.execute(statement)
    except Exception as e:
        logger.error(f"Failed to initialize schema: {e}")
        raise InitializationError(f"Failed to initialize schema: {e}") from e
    logger.info("Database schema initialized successfully.")


async def _main() -> None:
    from db.connection import PostgresPool

    pool = PostgresPool()
    await pool.open()
    try:
        await create_tables(pool)
    finally:
        await pool.close()


if __name__ == "__main__":
    asyncio.run(_main())
    print("✅ Database schema created successfully.")
