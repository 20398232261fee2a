"""Write-side use cases against the realtime datastore."""

import asyncio
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from location_console.application.services.location_normalizer import iter_snapshot_items
from location_console.domain.models import (
    LocationNotFoundError,
    LocationRecord,
    LocationUpdate,
)

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from location_console.domain.ports import LocationRepository, RealtimeDatastore


# Demo users written by the "seed" operation, in the flat layout mobile clients use.
TEST_USERS: dict[str, dict[str, Any]] = {
    "testuser1": {"latitude": 40.7589, "longitude": -73.9851, "username": "testuser1"},
    "testuser2": {"latitude": 40.7505, "longitude": -73.9934, "username": "testuser2"},
    "androiduser": {"latitude": 40.7614, "longitude": -73.9776, "username": "androiduser"},
}


def _location_matches(external_key: str, fields: Any, target: LocationRecord) -> bool:
    """Check whether a raw location object identifies the target record.

    A location object without an embedded username is identified by its
    external key, the same fallback the normalizer applies.
    """
    if not isinstance(fields, Mapping):
        return False
    username = fields.get("username") or external_key
    return target.matches(username, fields.get("latitude"), fields.get("longitude"))


def find_external_key(snapshot: Any, target: LocationRecord) -> str | None:
    """Find the datastore key holding the target location.

    Scans every entry, checking both the flat layout and every sub-entry of a
    nested history. This is a linear scan over all users.

    Returns:
        The first matching external key, or None.
    """
    for external_key, value in iter_snapshot_items(snapshot):
        if not isinstance(value, Mapping):
            continue
        location = value.get("location")
        if not isinstance(location, Mapping):
            continue
        if _location_matches(external_key, location, target):
            return external_key
        for sub_entry in location.values():
            if _location_matches(external_key, sub_entry, target):
                return external_key
    return None


class LocationAdminService:
    """Upserts, deletes and bulk maintenance of user locations."""

    def __init__(
        self,
        datastore: "RealtimeDatastore",
        users_path: str = "users",
        mirror: "LocationRepository | None" = None,
    ) -> None:
        """Initialize the service.

        Args:
            datastore: The realtime datastore holding user locations.
            users_path: Path of the users subtree.
            mirror: Optional server-side repository kept in step with writes.
        """
        self._datastore = datastore
        self.users_path = users_path.strip("/")
        self._mirror = mirror

    def _user_path(self, external_key: str) -> str:
        return f"{self.users_path}/{external_key}"

    async def upsert(self, update: LocationUpdate) -> LocationRecord:
        """Write a location under the key matching its username.

        Raises:
            DatastoreWriteError: If the datastore rejects the write.
        """
        record = update.to_record()
        location_path = f"{self._user_path(record.username)}/location"
        await self._datastore.write(location_path, record.to_wire())
        logger.info(f"Upserted location for {record.username}")

        if self._mirror is not None:
            stamped = update.model_copy(update={"timestamp": record.timestamp})
            await self._mirror.update_user_location(stamped)
        return record

    async def delete_matching(self, target: LocationRecord) -> str:
        """Delete the datastore entry whose location matches the target.

        Returns:
            The external key that was cleared.

        Raises:
            LocationNotFoundError: If no entry matches; nothing is written.
            DatastoreWriteError: If the datastore rejects the delete.
        """
        snapshot = await self._datastore.read(self.users_path)
        external_key = find_external_key(snapshot, target)
        if external_key is None:
            logger.warning(f"No datastore entry matches {target.username} for deletion")
            raise LocationNotFoundError(target.username, target.latitude, target.longitude)

        await self._datastore.write(self._user_path(external_key), None)
        logger.info(f"Deleted user {external_key} (username {target.username})")

        if self._mirror is not None:
            await self._mirror.delete_user_location(target.username)
        return external_key

    async def seed_test_data(self) -> list[str]:
        """Write the demo users. Returns their external keys."""
        await asyncio.gather(
            *(
                self._datastore.write(f"{self._user_path(user_id)}/location", location)
                for user_id, location in TEST_USERS.items()
            )
        )
        logger.info(f"Added {len(TEST_USERS)} test users")
        return list(TEST_USERS)

    async def clear_all(self) -> None:
        """Remove every user from the datastore."""
        await self._datastore.write(self.users_path, None)
        logger.info(f"Cleared all location data under '{self.users_path}'")
