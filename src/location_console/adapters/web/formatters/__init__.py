"""Formatters for web adapter."""

from location_console.adapters.web.formatters.location_formatter import LocationFormatter

__all__ = ["LocationFormatter"]
