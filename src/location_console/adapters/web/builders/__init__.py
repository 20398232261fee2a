"""Builders for web adapter."""

from location_console.adapters.web.builders.location_list_builder import (
    LocationListBuilder,
    avatar_color_index,
    filter_locations,
)

__all__ = ["LocationListBuilder", "avatar_color_index", "filter_locations"]
