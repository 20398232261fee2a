"""Broadcasters for web adapter."""

from location_console.adapters.web.broadcasters.state_broadcaster import StateBroadcaster

__all__ = ["StateBroadcaster"]
