"""Adapters layer - external system integrations."""

from location_console.adapters.config import AppConfig
from location_console.adapters.firebase import FirebaseRealtimeDatastore
from location_console.adapters.memory_location_repository import MemLocationRepository

__all__ = [
    "AppConfig",
    "FirebaseRealtimeDatastore",
    "MemLocationRepository",
]
