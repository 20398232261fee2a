"""Location normalizer port."""

from typing import Any, Protocol

from location_console.domain.models.location_record import LocationRecord


class LocationNormalizer(Protocol):
    """Port for turning a raw users snapshot into location records."""

    def normalize_snapshot(self, snapshot: Any, now_ms: int | None = None) -> list[LocationRecord]:
        """Normalize every entry of a snapshot, one record per username.

        Malformed entries are skipped. An empty or missing snapshot yields an
        empty list.
        """
        ...
