"""
services/location_service.py
----------------------------
Business logic for recording and querying device locations.
Sits between the request handlers and the LocationRepository.
"""

from typing import Optional

from config import DEFAULT_PAGE_LIMIT, DEFAULT_USER_NAME
from db.query import Database
from models.location import LocationReport, LocationStats
from repositories.location_repo import LocationRepository
from utils.logger import get_logger

logger = get_logger(__name__)


class LocationService:
    """
    Handles everything the query API needs from stored locations.

    Workflow:
        1. Receive already-parsed values from the handler.
        2. Apply defaults (anonymous user, empty device info).
        3. Persist or query via the repository.
        4. Return plain dicts and models ready for JSON shaping.
    """

    def __init__(self, db: Database):
        self.repo = LocationRepository(db)

    async def record(
        self,
        latitude: Optional[float],
        longitude: Optional[float],
        user_name: Optional[str] = None,
        device_info: Optional[str] = None,
    ) -> LocationReport:
        """
        Save a reported position.

        Raises:
            ValueError: If latitude or longitude is missing.
        """
        if latitude is None or longitude is None:
            raise ValueError("latitude and longitude are required")

        report = LocationReport(
            latitude=latitude,
            longitude=longitude,
            user_name=user_name or DEFAULT_USER_NAME,
            device_info=device_info or None,
        )
        return await self.repo.add(report)

    async def list_page(self, limit: int = DEFAULT_PAGE_LIMIT, offset: int = 0) -> dict:
        """
        One page of reports plus the overall total.

        Returns:
            Dict with keys 'data', 'total', 'limit', 'offset'.
        """
        if limit < 0 or offset < 0:
            raise ValueError("limit and offset must not be negative")
        rows = await self.repo.list_recent(limit, offset)
        total = await self.repo.count()
        return {"data": rows, "total": total, "limit": limit, "offset": offset}

    async def history(self, user_name: str) -> dict:
        """All reports of one user with their count."""
        rows = await self.repo.get_by_user(user_name)
        return {"data": rows, "count": len(rows)}

    async def latest(self) -> list[LocationReport]:
        return await self.repo.latest()

    async def stats(self) -> LocationStats:
        """Totals for all reports, distinct users and today's reports."""
        return LocationStats(
            total_locations=await self.repo.count(),
            total_users=await self.repo.count_users(),
            today_locations=await self.repo.count_today(),
        )

    async def remove(self, location_id: int) -> bool:
        """Delete a report. Returns False when no such report exists."""
        deleted = await self.repo.delete(location_id)
        if not deleted:
            logger.warning(f"Location #{location_id} not found for deletion")
        return deleted
