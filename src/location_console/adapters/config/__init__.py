"""Configuration adapters."""

from location_console.adapters.config.app_config import AppConfig

__all__ = ["AppConfig"]
