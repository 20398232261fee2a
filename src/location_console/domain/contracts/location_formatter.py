"""Protocol for formatting location records for display."""

from typing import Protocol

from location_console.domain.models.location_record import LocationRecord


class LocationFormatterProtocol(Protocol):
    """Protocol for formatting location records."""

    def format_last_seen(self, record: LocationRecord, now_ms: int) -> str:
        """Format the record age compactly (e.g. 'Just now', '5m ago')."""
        ...

    def format_coordinates(self, record: LocationRecord) -> str:
        """Format latitude and longitude for display."""
        ...

    def format_accuracy(self, record: LocationRecord) -> str:
        """Format the accuracy radius, or an empty string if unknown."""
        ...
