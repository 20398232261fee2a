"""Updaters for web adapter."""

from location_console.adapters.web.updaters.state_updater import StateUpdater

__all__ = ["StateUpdater"]
