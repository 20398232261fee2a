"""Protocol for keeping the projection in sync with the datastore."""

from typing import Protocol


class LocationSyncProtocol(Protocol):
    """Protocol for the single datastore subscription behind the projection."""

    @property
    def realtime_enabled(self) -> bool:
        """Whether the realtime subscription is requested."""
        ...

    @property
    def is_subscribed(self) -> bool:
        """Whether a subscription is currently delivering snapshots."""
        ...

    async def start(self) -> None:
        """Start syncing: subscribe if realtime is enabled, else fetch once."""
        ...

    async def stop(self) -> None:
        """Tear down the subscription, if any."""
        ...

    async def refresh(self) -> bool:
        """Fetch one snapshot on demand and apply it.

        Returns:
            True if a snapshot was fetched and applied.
        """
        ...

    async def set_realtime_enabled(self, enabled: bool) -> None:
        """Switch realtime mode on or off."""
        ...
