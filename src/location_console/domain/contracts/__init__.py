"""Contracts (protocols) for the location console."""

from location_console.domain.contracts.location_formatter import LocationFormatterProtocol
from location_console.domain.contracts.location_sync import LocationSyncProtocol
from location_console.domain.contracts.state_broadcaster import StateBroadcasterProtocol
from location_console.domain.contracts.state_updater import StateUpdaterProtocol

__all__ = [
    "LocationFormatterProtocol",
    "LocationSyncProtocol",
    "StateBroadcasterProtocol",
    "StateUpdaterProtocol",
]
