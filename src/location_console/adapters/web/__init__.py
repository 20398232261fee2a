"""Web adapters for the location console."""

from location_console.adapters.web.pyview_app import PyViewWebAdapter

__all__ = ["PyViewWebAdapter"]
