"""Datastore connection status domain model."""

from enum import StrEnum


class ConnectionStatus(StrEnum):
    """Connection state of the realtime subscription, as shown to users."""

    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
