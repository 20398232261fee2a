"""State management class."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from location_console.adapters.config.app_config import AppConfig
from location_console.adapters.web.broadcasters import StateBroadcaster
from location_console.adapters.web.sync import RealtimeLocationSync
from location_console.adapters.web.updaters import StateUpdater

from .locations_state import LocationsState

if TYPE_CHECKING:
    from pyview import LiveViewSocket

    from location_console.adapters.memory_location_repository import MemLocationRepository
    from location_console.domain.ports import LocationNormalizer, RealtimeDatastore

logger = logging.getLogger(__name__)


class State:
    """Manages shared state for the locations LiveView and the datastore sync."""

    def __init__(self, route_path: str = "/") -> None:
        """Initialize the state manager.

        Args:
            route_path: The path for this route, used to create a unique topic.
        """
        self.route_path = route_path
        self.locations_state = LocationsState()
        self.connected_sockets: set[LiveViewSocket[LocationsState]] = set()
        self.location_sync: RealtimeLocationSync | None = None
        normalized_path = route_path.strip("/").replace("/", ":") or "root"
        self.broadcast_topic: str = f"locations:updates:{normalized_path}"

    async def start_sync(
        self,
        datastore: RealtimeDatastore,
        normalizer: LocationNormalizer,
        config: AppConfig,
        mirror: MemLocationRepository | None = None,
    ) -> RealtimeLocationSync:
        """Create and start the datastore sync for this route.

        Args:
            datastore: The realtime datastore to follow.
            normalizer: Normalizer applied to every snapshot.
            config: Application configuration.
            mirror: Optional repository that receives every applied snapshot.

        Returns:
            The running sync component.
        """
        if not isinstance(config, AppConfig):
            raise TypeError("config must be an AppConfig instance")
        if not callable(getattr(normalizer, "normalize_snapshot", None)):
            raise TypeError("normalizer must implement the LocationNormalizer protocol")

        if self.location_sync is not None:
            logger.warning("Location sync already running")
            return self.location_sync

        self.location_sync = RealtimeLocationSync(
            datastore=datastore,
            normalizer=normalizer,
            state_updater=StateUpdater(self.locations_state),
            state_broadcaster=StateBroadcaster(),
            broadcast_topic=self.broadcast_topic,
            users_path=config.users_path,
            realtime_enabled=config.realtime_enabled,
            mirror=mirror,
        )
        await self.location_sync.start()
        return self.location_sync

    async def stop_sync(self) -> None:
        """Stop the datastore sync."""
        if self.location_sync is not None:
            await self.location_sync.stop()
            self.location_sync = None

    def register_socket(self, socket: LiveViewSocket[LocationsState]) -> None:
        """Register a socket for receiving projection updates."""
        self.connected_sockets.add(socket)
        logger.info(f"Registered socket, total connected: {len(self.connected_sockets)}")

    def unregister_socket(self, socket: LiveViewSocket[LocationsState]) -> None:
        """Unregister a socket."""
        self.connected_sockets.discard(socket)
        logger.info(f"Unregistered socket, total connected: {len(self.connected_sockets)}")
