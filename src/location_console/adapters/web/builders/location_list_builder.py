"""Builder for the location list display data."""

from typing import Any

from location_console.domain.contracts.location_formatter import LocationFormatterProtocol
from location_console.domain.models.location_record import LocationRecord

AVATAR_COLOR_COUNT = 5


def filter_locations(
    records: list[LocationRecord],
    search_query: str,
    online_only: bool,
    now_ms: int,
) -> list[LocationRecord]:
    """Filter records by a case-insensitive username substring and presence.

    Args:
        records: The projection to filter.
        search_query: Substring to look for in usernames; blank matches all.
        online_only: Keep only records that are currently online.
        now_ms: Reference time for presence.

    Returns:
        The matching records in projection order.
    """
    needle = search_query.strip().lower()
    return [
        record
        for record in records
        if needle in record.username.lower() and (not online_only or record.is_online(now_ms))
    ]


def avatar_color_index(username: str) -> int:
    """Pick a stable avatar color slot from the first character of the username."""
    return ord(username[0]) % AVATAR_COLOR_COUNT


class LocationListBuilder:
    """Builds template data for the location list."""

    def __init__(self, formatter: LocationFormatterProtocol) -> None:
        """Initialize the builder.

        Args:
            formatter: Location formatter for display strings.
        """
        self.formatter = formatter

    def build_display_data(
        self,
        records: list[LocationRecord],
        search_query: str,
        online_only: bool,
        now_ms: int,
        selected_username: str | None = None,
    ) -> dict[str, Any]:
        """Build display data for the location list.

        Args:
            records: The full projection.
            search_query: Current search text.
            online_only: Whether the online-only filter is active.
            now_ms: Reference time for presence and relative times.
            selected_username: Username of the highlighted record, if any.

        Returns:
            Dictionary with users, has_users, total_count, online_count and
            shown_count.
        """
        visible = filter_locations(records, search_query, online_only, now_ms)
        users: list[dict[str, Any]] = []
        for record in visible:
            online = record.is_online(now_ms)
            users.append(
                {
                    "username": record.username,
                    "initial": record.username[0].upper(),
                    "avatar_color": avatar_color_index(record.username),
                    "is_online": online,
                    "status_label": "Online" if online else "Offline",
                    "last_seen": self.formatter.format_last_seen(record, now_ms),
                    "coordinates": self.formatter.format_coordinates(record),
                    "accuracy": self.formatter.format_accuracy(record),
                    "latitude": repr(record.latitude),
                    "longitude": repr(record.longitude),
                    "is_selected": record.username == selected_username,
                }
            )

        online_count = sum(1 for record in records if record.is_online(now_ms))
        return {
            "users": users,
            "has_users": bool(users),
            "total_count": len(records),
            "online_count": online_count,
            "shown_count": len(users),
        }
