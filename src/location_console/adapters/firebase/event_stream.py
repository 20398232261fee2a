"""Server-sent event parsing and local tree maintenance for streaming reads.

The streaming endpoint sends the initial subtree as a ``put`` at path ``/``,
then incremental ``put``/``patch`` events relative to the subscribed node.
Applying them to a local copy lets subscribers see the full subtree on every
change, the same way the realtime SDKs deliver it.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from location_console.adapters.firebase.constants import EVENT_PATCH, EVENT_PUT


@dataclass(frozen=True)
class ServerSentEvent:
    """A single dispatched server-sent event."""

    event: str
    data: str


class ServerSentEventParser:
    """Incremental line-based parser for a text/event-stream body."""

    def __init__(self) -> None:
        self._event: str | None = None
        self._data_lines: list[str] = []

    def feed_line(self, line: str) -> ServerSentEvent | None:
        """Consume one line and return an event once a blank line ends it."""
        line = line.rstrip("\r\n")

        if not line:
            if self._event is None and not self._data_lines:
                return None
            event = ServerSentEvent(
                event=self._event or "message", data="\n".join(self._data_lines)
            )
            self._event = None
            self._data_lines = []
            return event

        if line.startswith(":"):
            # Comment line
            return None

        field, _, value = line.partition(":")
        value = value.removeprefix(" ")
        if field == "event":
            self._event = value
        elif field == "data":
            self._data_lines.append(value)
        return None


def split_path(path: str) -> list[str]:
    """Split a datastore path into its non-empty segments."""
    return [segment for segment in path.split("/") if segment]


def _as_children(node: Any) -> dict[str, Any]:
    """Return a mutable copy of a node's children.

    Arrays (children with integer keys) become string-keyed maps; leaves have
    no children.
    """
    if isinstance(node, Mapping):
        return dict(node)
    if isinstance(node, list):
        return {str(index): value for index, value in enumerate(node) if value is not None}
    return {}


def set_at_path(tree: Any, segments: list[str], value: Any) -> Any:
    """Return a copy of tree with value stored at the given path.

    Storing None removes the node; parents left without children are removed
    too, as the realtime database does. Untouched branches are shared.
    """
    if not segments:
        return value

    head, rest = segments[0], segments[1:]
    children = _as_children(tree)
    child = set_at_path(children.get(head), rest, value)
    if child is None:
        children.pop(head, None)
    else:
        children[head] = child
    return children or None


def apply_event(tree: Any, event: str, path: str, data: Any) -> Any:
    """Apply a put or patch event to the local copy of the subtree.

    Args:
        tree: Current local subtree value (None when empty).
        event: ``put`` replaces the node at path; ``patch`` updates its children.
        path: Event path relative to the subscribed node.
        data: Event payload.

    Returns:
        The new subtree value.
    """
    segments = split_path(path)
    if event == EVENT_PUT:
        return set_at_path(tree, segments, data)
    if event == EVENT_PATCH:
        if not isinstance(data, Mapping):
            raise ValueError(f"patch event data must be an object, got {type(data).__name__}")
        for child_path, child_value in data.items():
            tree = set_at_path(tree, segments + split_path(str(child_path)), child_value)
        return tree
    raise ValueError(f"Unsupported event type: {event}")
