"""Locations state dataclass."""

from dataclasses import dataclass, field
from datetime import datetime

from location_console.domain.models import ConnectionStatus, LocationRecord, OperationResult


@dataclass
class LocationsState:
    """State for the locations LiveView.

    The shared instance holds the projection; each socket gets its own copy
    carrying its search, filter and selection.
    """

    records: list[LocationRecord] = field(default_factory=list)
    last_update: datetime | None = None
    connection_status: ConnectionStatus = ConnectionStatus.CONNECTING
    realtime_enabled: bool = True
    is_loading: bool = True
    # Per-socket view settings
    search_query: str = ""
    show_online_only: bool = False
    selected_username: str | None = None
    notification: OperationResult | None = None
