"""Broadcaster for projection updates on the locations topics."""

from __future__ import annotations

import logging
from typing import Any

from pyview.live_socket import pub_sub_hub
from pyview.vendor.flet.pubsub import PubSub

from location_console.domain.contracts.state_broadcaster import (
    LOCATIONS_UPDATED,
    StateBroadcasterProtocol,
)

logger = logging.getLogger(__name__)


class StateBroadcaster(StateBroadcasterProtocol):
    """Tells every LiveView subscribed to a locations topic to re-read the projection.

    Only a signal is published; sockets copy the shared state themselves, so
    a burst of snapshots never queues full record lists per socket.
    """

    def __init__(self, hub: Any = None) -> None:
        """Initialize the broadcaster.

        Args:
            hub: PubSub hub to publish on. Defaults to pyview's socket hub.
        """
        self._hub = hub if hub is not None else pub_sub_hub
        self._publishers: dict[str, PubSub] = {}

    def _publisher(self, topic: str) -> PubSub:
        publisher = self._publishers.get(topic)
        if publisher is None:
            publisher = PubSub(self._hub, topic)
            self._publishers[topic] = publisher
        return publisher

    async def broadcast_update(self, topic: str) -> None:
        """Publish LOCATIONS_UPDATED on the topic.

        Failures are logged; the sync keeps running without subscribers.

        Args:
            topic: The locations topic of a route, e.g. ``locations:updates:root``.
        """
        try:
            await self._publisher(topic).send_all_on_topic_async(topic, LOCATIONS_UPDATED)
            logger.debug(f"Signalled projection update on {topic}")
        except Exception as e:
            logger.error(f"Failed to broadcast projection update on {topic}: {e}", exc_info=True)
