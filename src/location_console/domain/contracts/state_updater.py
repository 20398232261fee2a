"""Protocol for updating the location projection."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from datetime import datetime

    from location_console.domain.models.connection_status import ConnectionStatus
    from location_console.domain.models.location_record import LocationRecord


class StateUpdaterProtocol(Protocol):
    """Protocol for updating the shared locations state."""

    def replace_locations(self, records: list["LocationRecord"]) -> None:
        """Replace the whole projection with a freshly normalized snapshot.

        Args:
            records: Normalized records, one per username.
        """
        ...

    def update_connection_status(self, status: "ConnectionStatus") -> None:
        """Update the datastore connection status.

        Args:
            status: The new connection status.
        """
        ...

    def update_last_update_time(self, time: "datetime") -> None:
        """Update the last update timestamp in the state.

        Args:
            time: The timestamp of the last applied snapshot.
        """
        ...

    def update_realtime_enabled(self, enabled: bool) -> None:
        """Record whether realtime mode is on.

        Args:
            enabled: True if the subscription is requested.
        """
        ...
