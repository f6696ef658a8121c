"""
models/location.py
------------------
Domain models for geolocation reports and their aggregate counts.
"""

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Optional


@dataclass
class LocationReport:
    """
    A single position reported by a client device.

    Attributes:
        latitude: Reported latitude. Required.
        longitude: Reported longitude. Required.
        user_name: Who reported it (default sentinel applied by the service).
        device_info: Free-form description of the reporting device.
        id: Database primary key (None for new records).
        timestamp: Set by the database on insert (None for new records).
    """
    latitude: float
    longitude: float
    user_name: Optional[str] = None
    device_info: Optional[str] = None
    id: Optional[int] = None
    timestamp: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: dict) -> "LocationReport":
        """
        Build a report from a façade row.

        Raises:
            KeyError: If `id`, `latitude` or `longitude` is missing from the row.
        """
        return cls(
            id=row["id"],
            latitude=row["latitude"],
            longitude=row["longitude"],
            user_name=row.get("user_name"),
            device_info=row.get("device_info"),
            timestamp=row.get("timestamp"),
        )

    def __str__(self) -> str:
        return f"#{self.id} {self.user_name} @ ({self.latitude}, {self.longitude})"


@dataclass
class LocationStats:
    """Aggregate counts over all stored reports."""
    total_locations: int
    total_users: int
    today_locations: int

    def as_dict(self) -> dict:
        return asdict(self)
