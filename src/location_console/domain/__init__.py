"""Domain layer - core business logic and models."""

from location_console.domain.models import (
    ConnectionStatus,
    LocationRecord,
    LocationUpdate,
)
from location_console.domain.ports import (
    DisplayAdapter,
    LocationRepository,
    RealtimeDatastore,
)

__all__ = [
    "ConnectionStatus",
    "DisplayAdapter",
    "LocationRecord",
    "LocationRepository",
    "LocationUpdate",
    "RealtimeDatastore",
]
