"""Location admin port."""

from typing import Protocol

from location_console.domain.models.location_record import LocationRecord, LocationUpdate


class LocationAdmin(Protocol):
    """Port for write operations against the users subtree."""

    async def upsert(self, update: LocationUpdate) -> LocationRecord:
        """Write a location under the key matching its username."""
        ...

    async def delete_matching(self, target: LocationRecord) -> str:
        """Delete the entry whose location matches the target; returns its key."""
        ...

    async def seed_test_data(self) -> list[str]:
        """Write the demo users; returns their keys."""
        ...

    async def clear_all(self) -> None:
        """Remove every user."""
        ...
