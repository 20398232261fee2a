"""In-memory location repository."""

from __future__ import annotations

import logging

from location_console.domain.models import LocationRecord, LocationUpdate
from location_console.domain.ports import LocationRepository

logger = logging.getLogger(__name__)


class MemLocationRepository(LocationRepository):
    """Keeps the latest location per username in process memory."""

    def __init__(self) -> None:
        """Initialize an empty repository."""
        self._locations: dict[str, LocationRecord] = {}

    async def get_user_location(self, username: str) -> LocationRecord | None:
        """Get the stored location for a username."""
        return self._locations.get(username)

    async def get_all_user_locations(self) -> list[LocationRecord]:
        """Get all stored locations in insertion order."""
        return list(self._locations.values())

    async def update_user_location(self, update: LocationUpdate) -> LocationRecord:
        """Store an update, replacing any previous location for the username."""
        record = update.to_record()
        self._locations[record.username] = record
        logger.debug(f"Stored location for {record.username}")
        return record

    async def delete_user_location(self, username: str) -> bool:
        """Remove the location for a username."""
        return self._locations.pop(username, None) is not None

    def replace_all(self, records: list[LocationRecord]) -> None:
        """Replace every stored location with a normalized snapshot."""
        self._locations = {record.username: record for record in records}
