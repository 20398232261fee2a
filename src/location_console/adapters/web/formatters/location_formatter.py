"""Formatter for location records."""

from datetime import datetime

from location_console.domain.contracts.location_formatter import LocationFormatterProtocol
from location_console.domain.models.location_record import LocationRecord


class LocationFormatter(LocationFormatterProtocol):
    """Formats location records for the dashboard."""

    def format_last_seen(self, record: LocationRecord, now_ms: int) -> str:
        """Format the record age compactly (e.g. 'Just now', '5m ago', '2h ago', '3d ago')."""
        minutes = (now_ms - record.timestamp) // 60_000
        if minutes < 1:
            return "Just now"
        if minutes < 60:
            return f"{minutes}m ago"
        hours = minutes // 60
        if hours < 24:
            return f"{hours}h ago"
        return f"{hours // 24}d ago"

    def format_coordinates(self, record: LocationRecord) -> str:
        """Format latitude and longitude to 4 decimals."""
        return f"{record.latitude:.4f}, {record.longitude:.4f}"

    def format_accuracy(self, record: LocationRecord) -> str:
        """Format the accuracy radius, or an empty string if unknown."""
        if record.accuracy is None:
            return ""
        return f"±{record.accuracy:g}m accuracy"

    def format_update_time(self, update_time: datetime | None) -> str:
        """Format last update time."""
        if not update_time:
            return "Never"
        return update_time.strftime("%H:%M:%S")
