"""Realtime datastore port."""

from collections.abc import AsyncIterator
from typing import Any, Protocol


class RealtimeDatastore(Protocol):
    """Port for a hosted, observable key-value tree.

    Paths are slash-separated and relative to the database root.
    """

    def subscribe(self, path: str) -> AsyncIterator[Any]:
        """Yield the full value of the subtree at path on every change.

        The first item is the current value. The iterator ends when the
        server closes the subscription and raises DatastoreError on failure.
        """
        ...

    async def read(self, path: str) -> Any:
        """Read the current value of the subtree at path (None if empty)."""
        ...

    async def write(self, path: str, value: Any | None) -> None:
        """Replace the value at path. Writing None clears it."""
        ...
