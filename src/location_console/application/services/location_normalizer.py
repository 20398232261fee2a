"""Normalization of raw datastore entries into location records."""

import logging
import math
from collections.abc import Callable, Mapping
from typing import Any

from pydantic import ValidationError

from location_console.domain.models import (
    FlatLocationEntry,
    HistorySelection,
    LocationRecord,
    NestedLocationHistory,
    RawLocationEntry,
    current_time_ms,
)

logger = logging.getLogger(__name__)

_COORDINATE_FIELDS = ("latitude", "longitude")


def iter_snapshot_items(snapshot: Any) -> list[tuple[str, Any]]:
    """List (external key, raw value) pairs of a users snapshot in enumeration order.

    The realtime database returns children with sequential integer keys as a
    JSON array, with gaps filled by null; those are mapped back to string keys.
    """
    if snapshot is None:
        return []
    if isinstance(snapshot, Mapping):
        return [(str(key), value) for key, value in snapshot.items()]
    if isinstance(snapshot, list):
        return [(str(index), value) for index, value in enumerate(snapshot) if value is not None]
    logger.warning(f"Ignoring users snapshot of unexpected type {type(snapshot).__name__}")
    return []


class LocationNormalizer:
    """Turns loosely structured datastore entries into validated LocationRecords."""

    def __init__(
        self,
        accept_zero_coordinates: bool = False,
        history_selection: HistorySelection = HistorySelection.LAST,
        clock: Callable[[], int] = current_time_ms,
    ) -> None:
        """Initialize the normalizer.

        Args:
            accept_zero_coordinates: Treat a coordinate of exactly 0 as present.
                Off by default, matching what mobile clients have relied on.
            history_selection: How to pick the current entry of a nested history.
            clock: Source of the current time in epoch milliseconds.
        """
        self.accept_zero_coordinates = accept_zero_coordinates
        self.history_selection = history_selection
        self.clock = clock

    def classify_entry(self, external_key: str, value: Any) -> RawLocationEntry | None:
        """Resolve which layout a raw entry uses.

        Returns:
            FlatLocationEntry when ``location`` carries coordinate fields itself,
            NestedLocationHistory when it is a map of sub-entries, None otherwise.
        """
        if not isinstance(value, Mapping):
            return None
        location = value.get("location")
        if not isinstance(location, Mapping) or not location:
            return None
        if any(field in location for field in _COORDINATE_FIELDS):
            return FlatLocationEntry(external_key=external_key, fields=location)
        return NestedLocationHistory(external_key=external_key, entries=tuple(location.items()))

    def normalize_entry(
        self, external_key: str, value: Any, now_ms: int | None = None
    ) -> LocationRecord | None:
        """Convert one datastore entry into zero or one location record.

        Entries without usable coordinates yield None. Entries that fail schema
        validation are logged and also yield None.
        """
        entry = self.classify_entry(external_key, value)
        if entry is None:
            return None

        fields = self._select_fields(entry)
        if fields is None or not self._has_coordinates(fields):
            return None

        if now_ms is None:
            now_ms = self.clock()

        try:
            return LocationRecord.model_validate(
                {
                    "username": fields.get("username") or external_key,
                    "latitude": fields.get("latitude"),
                    "longitude": fields.get("longitude"),
                    "timestamp": fields.get("timestamp") or now_ms,
                    "accuracy": fields.get("accuracy"),
                }
            )
        except ValidationError as e:
            logger.warning(
                f"Invalid location data for user {external_key}: {e.error_count()} validation error(s)"
            )
            logger.debug(f"Validation details for {external_key}: {e}")
            return None

    def normalize_snapshot(self, snapshot: Any, now_ms: int | None = None) -> list[LocationRecord]:
        """Normalize a full users snapshot.

        Every key is processed independently; a failure on one key never stops
        the others. Usernames are unique in the result: a later record for the
        same username replaces the earlier one.
        """
        if now_ms is None:
            now_ms = self.clock()

        records: dict[str, LocationRecord] = {}
        skipped = 0
        for external_key, value in iter_snapshot_items(snapshot):
            try:
                record = self.normalize_entry(external_key, value, now_ms)
            except Exception as e:
                logger.warning(f"Skipping user {external_key} after unexpected error: {e}")
                record = None
            if record is None:
                skipped += 1
                continue
            records[record.username] = record

        logger.debug(f"Normalized {len(records)} location(s), skipped {skipped} entry(ies)")
        return list(records.values())

    def _select_fields(self, entry: RawLocationEntry) -> Mapping[str, Any] | None:
        """Pick the location object to extract fields from."""
        if isinstance(entry, FlatLocationEntry):
            return entry.fields

        if not entry.entries:
            return None

        if self.history_selection is HistorySelection.LATEST_TIMESTAMP:
            candidates = [
                (index, sub_value)
                for index, (_, sub_value) in enumerate(entry.entries)
                if isinstance(sub_value, Mapping)
            ]
            if not candidates:
                return None
            # Ties go to the entry enumerated last
            _, latest = max(
                candidates, key=lambda item: (self._timestamp_sort_key(item[1]), item[0])
            )
            return latest

        _, last = entry.entries[-1]
        return last if isinstance(last, Mapping) else None

    @staticmethod
    def _timestamp_sort_key(fields: Mapping[str, Any]) -> float:
        timestamp = fields.get("timestamp")
        if isinstance(timestamp, bool) or not isinstance(timestamp, int | float):
            return -math.inf
        return float(timestamp)

    def _has_coordinates(self, fields: Mapping[str, Any]) -> bool:
        return all(self._is_present(fields.get(field)) for field in _COORDINATE_FIELDS)

    def _is_present(self, value: Any) -> bool:
        """Truthiness check for a coordinate value.

        NaN counts as missing. Zero counts as missing unless
        accept_zero_coordinates is set.
        """
        if value is None or isinstance(value, bool):
            return bool(value)
        if isinstance(value, float) and math.isnan(value):
            return False
        if isinstance(value, int | float) and value == 0:
            return self.accept_zero_coordinates
        return bool(value)
