"""
repositories/location_repo.py
-----------------------------
Data access layer for geolocation reports.
All SQL queries related to the `user_locations` table live here.
"""

from typing import Optional

from config import LATEST_LIMIT
from db.query import Database
from models.location import LocationReport
from utils.logger import get_logger

logger = get_logger(__name__)


class LocationRepository:
    """Repository for insert, read and delete operations on user_locations."""

    def __init__(self, db: Database):
        self.db = db

    # ── CREATE ────────────────────────────────────────────

    async def add(self, report: LocationReport) -> LocationReport:
        """
        Insert a new location report.

        Args:
            report: The LocationReport to persist.

        Returns:
            The same report with its `id` populated.
        """
        sql = """
            INSERT INTO user_locations (user_name, latitude, longitude, device_info)
            VALUES (?, ?, ?, ?)
            RETURNING id
        """
        result = await self.db.run(sql, [
            report.user_name, report.latitude, report.longitude, report.device_info,
        ])
        report.id = result.insert_id
        logger.info(f"Saved location {report}")
        return report

    # ── READ ──────────────────────────────────────────────

    async def get_by_id(self, location_id: int) -> Optional[LocationReport]:
        """Fetch a single report by primary key, or None if not found."""
        row = await self.db.get("SELECT * FROM user_locations WHERE id = ?", [location_id])
        return LocationReport.from_row(row) if row else None

    async def list_recent(self, limit: int, offset: int = 0) -> list[LocationReport]:
        """
        Fetch one page of reports, newest first.

        Args:
            limit: Maximum number of rows.
            offset: Number of rows to skip.
        """
        sql = """
            SELECT * FROM user_locations
            ORDER BY timestamp DESC
            LIMIT ? OFFSET ?
        """
        rows = await self.db.all(sql, [limit, offset])
        return [LocationReport.from_row(r) for r in rows]

    async def latest(self, limit: int = LATEST_LIMIT) -> list[LocationReport]:
        """The most recent reports across all users."""
        return await self.list_recent(limit)

    async def get_by_user(self, user_name: str) -> list[LocationReport]:
        """All reports of one user, newest first."""
        sql = """
            SELECT * FROM user_locations
            WHERE user_name = ?
            ORDER BY timestamp DESC
        """
        rows = await self.db.all(sql, [user_name])
        return [LocationReport.from_row(r) for r in rows]

    # ── AGGREGATES ────────────────────────────────────────

    async def count(self) -> int:
        row = await self.db.get("SELECT COUNT(*) AS count FROM user_locations")
        return int(row["count"])

    async def count_users(self) -> int:
        row = await self.db.get("SELECT COUNT(DISTINCT user_name) AS count FROM user_locations")
        return int(row["count"])

    async def count_today(self) -> int:
        sql = """
            SELECT COUNT(*) AS count
            FROM user_locations
            WHERE DATE(timestamp) = CURRENT_DATE
        """
        row = await self.db.get(sql)
        return int(row["count"])

    # ── DELETE ────────────────────────────────────────────

    async def delete(self, location_id: int) -> bool:
        """
        Delete a report by ID.

        Returns:
            True if a row was deleted, False otherwise.
        """
        result = await self.db.run("DELETE FROM user_locations WHERE id = ?", [location_id])
        deleted = result.changes == 1
        if deleted:
            logger.info(f"Deleted location #{location_id}")
        return deleted
