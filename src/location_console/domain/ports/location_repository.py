"""Location repository port."""

from typing import Protocol

from location_console.domain.models.location_record import LocationRecord, LocationUpdate


class LocationRepository(Protocol):
    """Port for a keyed store of the latest location per username."""

    async def get_user_location(self, username: str) -> LocationRecord | None:
        """Get the stored location for a username."""
        ...

    async def get_all_user_locations(self) -> list[LocationRecord]:
        """Get all stored locations in insertion order."""
        ...

    async def update_user_location(self, update: LocationUpdate) -> LocationRecord:
        """Store an update, replacing any previous location for the username."""
        ...

    async def delete_user_location(self, username: str) -> bool:
        """Remove the location for a username. Returns True if one was removed."""
        ...
