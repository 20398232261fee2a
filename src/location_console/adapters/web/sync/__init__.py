"""Datastore sync for the web adapter."""

from location_console.adapters.web.sync.realtime_location_sync import RealtimeLocationSync

__all__ = ["RealtimeLocationSync"]
