"""State management for the locations LiveView and datastore sync."""

from location_console.adapters.web.state.locations_state import LocationsState
from location_console.adapters.web.state.state import State

__all__ = ["LocationsState", "State"]
