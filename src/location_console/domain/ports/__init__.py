"""Ports (interfaces) for the ports-and-adapters architecture."""

from location_console.domain.ports.display_adapter import DisplayAdapter
from location_console.domain.ports.location_admin import LocationAdmin
from location_console.domain.ports.location_normalizer import LocationNormalizer
from location_console.domain.ports.location_repository import LocationRepository
from location_console.domain.ports.realtime_datastore import RealtimeDatastore

__all__ = [
    "DisplayAdapter",
    "LocationAdmin",
    "LocationNormalizer",
    "LocationRepository",
    "RealtimeDatastore",
]
