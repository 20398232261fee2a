"""Realtime sync of the location projection with the datastore."""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from location_console.domain.contracts.location_sync import LocationSyncProtocol
from location_console.domain.contracts.state_broadcaster import (
    StateBroadcasterProtocol,  # noqa: TC001 - Runtime dependency: used in __init__ signature
)
from location_console.domain.contracts.state_updater import (
    StateUpdaterProtocol,  # noqa: TC001 - Runtime dependency: used in __init__ signature
)
from location_console.domain.models import ConnectionStatus, DatastoreError

if TYPE_CHECKING:
    from location_console.adapters.memory_location_repository import MemLocationRepository
    from location_console.domain.ports import LocationNormalizer, RealtimeDatastore

logger = logging.getLogger(__name__)


class RealtimeLocationSync(LocationSyncProtocol):
    """Follows the users subtree and replaces the projection on every change."""

    def __init__(
        self,
        datastore: RealtimeDatastore,
        normalizer: LocationNormalizer,
        state_updater: StateUpdaterProtocol,
        state_broadcaster: StateBroadcasterProtocol,
        broadcast_topic: str,
        users_path: str = "users",
        realtime_enabled: bool = True,
        mirror: MemLocationRepository | None = None,
    ) -> None:
        """Initialize the sync component.

        Args:
            datastore: The realtime datastore to follow.
            normalizer: Normalizer applied to every snapshot.
            state_updater: Updater for the shared state.
            state_broadcaster: Broadcaster for state updates.
            broadcast_topic: The pub/sub topic to broadcast to.
            users_path: Path of the users subtree.
            realtime_enabled: Subscribe on start instead of fetching once.
            mirror: Optional repository that receives every applied snapshot.
        """
        self.datastore = datastore
        self.normalizer = normalizer
        self.state_updater = state_updater
        self.state_broadcaster = state_broadcaster
        self.broadcast_topic = broadcast_topic
        self.users_path = users_path
        self.mirror = mirror
        self._realtime_enabled = realtime_enabled
        self._task: asyncio.Task | None = None

    @property
    def realtime_enabled(self) -> bool:
        """Whether the realtime subscription is requested."""
        return self._realtime_enabled

    @property
    def is_subscribed(self) -> bool:
        """Whether a subscription task is currently running."""
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start syncing: subscribe if realtime is enabled, else fetch once."""
        self.state_updater.update_realtime_enabled(self._realtime_enabled)
        if self._realtime_enabled:
            self._start_subscription()
        else:
            await self._fetch_once()

    async def stop(self) -> None:
        """Tear down the subscription, if any."""
        await self._cancel_subscription()

    async def refresh(self) -> bool:
        """Fetch one snapshot on demand and apply it.

        With realtime active the subscription already delivers every change,
        so nothing is fetched.

        Returns:
            True if a snapshot was fetched and applied.
        """
        if self.is_subscribed:
            logger.debug("Refresh skipped: realtime subscription is active")
            return False
        return await self._fetch_once()

    async def set_realtime_enabled(self, enabled: bool) -> None:
        """Switch realtime mode on or off."""
        if enabled == self._realtime_enabled and (self.is_subscribed or not enabled):
            return
        self._realtime_enabled = enabled
        self.state_updater.update_realtime_enabled(enabled)
        if enabled:
            self._start_subscription()
        else:
            await self._cancel_subscription()
        logger.info(f"Realtime updates {'enabled' if enabled else 'disabled'}")
        await self.state_broadcaster.broadcast_update(self.broadcast_topic)

    def _start_subscription(self) -> None:
        if self.is_subscribed:
            logger.warning("Location subscription already running")
            return
        self.state_updater.update_connection_status(ConnectionStatus.CONNECTING)
        self._task = asyncio.create_task(self._subscription_loop())
        logger.info(f"Started location subscription on '{self.users_path}'")

    async def _cancel_subscription(self) -> None:
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                logger.info("Location subscription cancelled")
            logger.info("Stopped location subscription")
        self._task = None

    async def _subscription_loop(self) -> None:
        """Apply every snapshot the datastore pushes until the stream ends."""
        try:
            async for snapshot in self.datastore.subscribe(self.users_path):
                self.state_updater.update_connection_status(ConnectionStatus.CONNECTED)
                await self._apply_snapshot(snapshot)
            logger.warning("Location subscription ended by the server")
        except asyncio.CancelledError:
            raise
        except DatastoreError as e:
            logger.error(f"Location subscription failed: {e}")
        except Exception as e:
            logger.error(f"Unexpected error in location subscription: {e}", exc_info=True)
        self.state_updater.update_connection_status(ConnectionStatus.DISCONNECTED)
        await self.state_broadcaster.broadcast_update(self.broadcast_topic)

    async def _fetch_once(self) -> bool:
        try:
            snapshot = await self.datastore.read(self.users_path)
        except DatastoreError as e:
            logger.error(f"Failed to fetch locations: {e}")
            self.state_updater.update_connection_status(ConnectionStatus.DISCONNECTED)
            await self.state_broadcaster.broadcast_update(self.broadcast_topic)
            return False
        self.state_updater.update_connection_status(ConnectionStatus.CONNECTED)
        await self._apply_snapshot(snapshot)
        return True

    async def _apply_snapshot(self, snapshot: Any) -> None:
        """Normalize a full snapshot and replace the projection with it."""
        records = self.normalizer.normalize_snapshot(snapshot)
        self.state_updater.replace_locations(records)
        self.state_updater.update_last_update_time(datetime.now(UTC))
        if self.mirror is not None:
            self.mirror.replace_all(records)

        logger.debug(f"Applied snapshot with {len(records)} location(s)")
        await self.state_broadcaster.broadcast_update(self.broadcast_topic)
