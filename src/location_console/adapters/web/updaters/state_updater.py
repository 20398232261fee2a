"""Updater for locations state."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from location_console.adapters.web.state.locations_state import (
    LocationsState,  # noqa: TC001 - Runtime dependency: used in __init__
)
from location_console.domain.contracts.state_updater import StateUpdaterProtocol
from location_console.domain.models import ConnectionStatus

if TYPE_CHECKING:
    from datetime import datetime

    from location_console.domain.models import LocationRecord

logger = logging.getLogger(__name__)


class StateUpdater(StateUpdaterProtocol):
    """Updates locations state."""

    def __init__(self, locations_state: LocationsState) -> None:
        """Initialize the state updater.

        Args:
            locations_state: The LocationsState instance to update.
        """
        self.locations_state = locations_state

    def replace_locations(self, records: list[LocationRecord]) -> None:
        """Swap in a new projection; nothing from the previous one is kept.

        Args:
            records: Normalized records, one per username.
        """
        self.locations_state.records = list(records)
        self.locations_state.is_loading = False
        logger.debug(f"Replaced projection: {len(records)} location(s)")

    def update_connection_status(self, status: ConnectionStatus) -> None:
        """Update the datastore connection status.

        Args:
            status: The new connection status.
        """
        self.locations_state.connection_status = status
        if status != ConnectionStatus.CONNECTING:
            self.locations_state.is_loading = False
        logger.debug(f"Updated connection status: {status}")

    def update_last_update_time(self, time: datetime) -> None:
        """Update the last update timestamp in the state.

        Args:
            time: The timestamp of the last applied snapshot.
        """
        self.locations_state.last_update = time
        logger.debug(f"Updated last update time: {time}")

    def update_realtime_enabled(self, enabled: bool) -> None:
        """Record whether realtime mode is on.

        Args:
            enabled: True if the subscription is requested.
        """
        self.locations_state.realtime_enabled = enabled
        logger.debug(f"Updated realtime mode: {enabled}")
