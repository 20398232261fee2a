"""Domain models for the location console."""

from location_console.domain.models.connection_status import ConnectionStatus
from location_console.domain.models.errors import (
    DatastoreError,
    DatastoreWriteError,
    LocationConsoleError,
    LocationNotFoundError,
)
from location_console.domain.models.location_record import LocationRecord, LocationUpdate
from location_console.domain.models.operation_result import OperationResult
from location_console.domain.models.presence import ONLINE_WINDOW_MS, current_time_ms, is_online
from location_console.domain.models.raw_location import (
    FlatLocationEntry,
    HistorySelection,
    NestedLocationHistory,
    RawLocationEntry,
)

__all__ = [
    "ONLINE_WINDOW_MS",
    "ConnectionStatus",
    "DatastoreError",
    "DatastoreWriteError",
    "FlatLocationEntry",
    "HistorySelection",
    "LocationConsoleError",
    "LocationNotFoundError",
    "LocationRecord",
    "LocationUpdate",
    "NestedLocationHistory",
    "OperationResult",
    "RawLocationEntry",
    "current_time_ms",
    "is_online",
]
