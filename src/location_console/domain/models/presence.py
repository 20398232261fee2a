"""Presence derivation from location timestamps."""

import time

# A record counts as online while its last write is younger than five minutes.
ONLINE_WINDOW_MS = 300_000


def current_time_ms() -> int:
    """Return the current wall-clock time in milliseconds since the epoch."""
    return int(time.time() * 1000)


def is_online(timestamp_ms: int, now_ms: int | None = None) -> bool:
    """Check whether a record with the given timestamp is online.

    Args:
        timestamp_ms: Last write time of the record in epoch milliseconds.
        now_ms: Reference time in epoch milliseconds. Defaults to the current time.

    Returns:
        True if the record is younger than the online window, False otherwise.
        A difference of exactly ONLINE_WINDOW_MS is offline.
    """
    if now_ms is None:
        now_ms = current_time_ms()
    return (now_ms - timestamp_ms) < ONLINE_WINDOW_MS
