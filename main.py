"""
main.py
-------
Entry point for the location tracker backend.

Responsibilities:
    - Open the database connection pool.
    - Create the schema before anything is allowed to query it.
    - Hand a ready LocationService to the request handlers.
    - Close the pool on shutdown.
"""

import asyncio

from db.connection import PostgresPool
from db.errors import InitializationError, StoreConnectionError
from db.init_db import create_tables
from db.query import Database
from services.location_service import LocationService
from utils.logger import get_logger

logger = get_logger(__name__)


async def startup(pool: PostgresPool) -> LocationService:
    """
    Open the pool and initialize the schema.

    Raises:
        StoreConnectionError: If the pool cannot be opened.
        InitializationError: If the schema cannot be applied. There is no
            degraded mode; the caller should exit.
    """
    logger.info("Initializing database...")
    try:
        await pool.open()
    except StoreConnectionError:
        logger.critical("Database initialization failed, shutting down.")
        raise
    try:
        await create_tables(pool)
    except InitializationError:
        logger.critical("Database initialization failed, shutting down.")
        await pool.close()
        raise
    return LocationService(Database(pool))


async def shutdown(pool: PostgresPool) -> None:
    await pool.close()
    logger.info("Location tracker stopped.")


async def run() -> None:
    """Initialize the database and report current totals."""
    pool = PostgresPool()
    service = await startup(pool)
    try:
        stats = await service.stats()
        logger.info(
            f"🚀 Database ready: {stats.total_locations} locations, "
            f"{stats.total_users} users, {stats.today_locations} today."
        )
    finally:
        await shutdown(pool)


def main() -> None:
    asyncio.run(run())


if __name__ == "__main__":
    main()
