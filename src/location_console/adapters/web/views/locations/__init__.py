"""Locations LiveView package."""

from location_console.adapters.web.views.locations.locations import (
    LocationsLiveView,
    create_locations_live_view,
)

__all__ = ["LocationsLiveView", "create_locations_live_view"]
