"""Raw datastore entry shapes.

Mobile clients have written two layouts under ``users/<key>/location`` over
time. An entry is resolved into exactly one of these shapes before any field
extraction happens.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class HistorySelection(StrEnum):
    """Rule for picking the current position out of a nested history."""

    LAST = "last"
    LATEST_TIMESTAMP = "latest_timestamp"


@dataclass(frozen=True)
class FlatLocationEntry:
    """``location`` holds the coordinate fields directly."""

    external_key: str
    fields: Mapping[str, Any]


@dataclass(frozen=True)
class NestedLocationHistory:
    """``location`` maps sub-keys (one per ping) to location objects.

    ``entries`` keeps the datastore's enumeration order, which is not
    guaranteed to be chronological.
    """

    external_key: str
    entries: tuple[tuple[str, Any], ...]


RawLocationEntry = FlatLocationEntry | NestedLocationHistory
