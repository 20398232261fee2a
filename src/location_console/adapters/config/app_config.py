"""12-factor configuration adapter using environment variables."""

from typing import Any

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from location_console.domain.models import HistorySelection

# Hosted demo project used when no Firebase settings are supplied
DEFAULT_FIREBASE_PROJECT_ID = "onecall-c9557"


def default_database_url(project_id: str) -> str:
    """Build the realtime database URL Firebase assigns to a project by default."""
    return f"https://{project_id}-default-rtdb.firebaseio.com/"


class AppConfig(BaseSettings):
    """Application configuration following 12-factor principles."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server configuration
    host: str = Field(default="0.0.0.0", description="Host to bind the server to")
    port: int = Field(default=8000, description="Port to bind the server to")
    log_level: str = Field(default="INFO", description="Root log level")
    title: str = Field(default="Location Tracker", description="Page title displayed in browser tab")
    theme: str = Field(
        default="light",
        description="UI theme: 'light', 'dark', or 'auto' (follows system preference)",
    )

    # Firebase configuration (the VITE_ names are what the mobile/web clients use)
    firebase_api_key: str = Field(
        default="default_api_key",
        validation_alias=AliasChoices("firebase_api_key", "vite_firebase_api_key"),
        description="Web API key for client SDKs; never sent to the REST API",
    )
    firebase_project_id: str = Field(
        default=DEFAULT_FIREBASE_PROJECT_ID,
        validation_alias=AliasChoices("firebase_project_id", "vite_firebase_project_id"),
        description="Firebase project identifier",
    )
    firebase_database_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("firebase_database_url", "vite_firebase_database_url"),
        description="Realtime database URL (derived from the project id when unset)",
    )
    firebase_app_id: str = Field(
        default="default_app_id",
        validation_alias=AliasChoices("firebase_app_id", "vite_firebase_app_id"),
        description="Firebase application identifier",
    )
    firebase_auth_token: str | None = Field(
        default=None,
        validation_alias=AliasChoices("firebase_auth_token", "firebase_database_secret"),
        description="Database secret or ID token sent as the auth query parameter",
    )

    # Sync configuration
    users_path: str = Field(default="users", description="Datastore path holding user entries")
    realtime_enabled: bool = Field(
        default=True,
        description="Subscribe to datastore changes on startup instead of fetching once",
    )
    datastore_timeout_seconds: int = Field(
        default=10, description="Timeout for one-shot datastore requests in seconds"
    )
    accept_zero_coordinates: bool = Field(
        default=False,
        description="Treat a latitude or longitude of exactly 0 as a real coordinate",
    )
    history_selection: HistorySelection = Field(
        default=HistorySelection.LAST,
        description="How to pick the current entry of a nested location history",
    )

    @field_validator("theme")
    @classmethod
    def validate_theme(cls, v: str) -> str:
        """Validate theme is either 'light', 'dark', or 'auto'."""
        if v.lower() not in ("light", "dark", "auto"):
            raise ValueError("theme must be either 'light', 'dark', or 'auto'")
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a standard logging level name."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError("log_level must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return level

    @field_validator("users_path")
    @classmethod
    def validate_users_path(cls, v: str) -> str:
        """Strip surrounding slashes; the path must not be empty."""
        path = v.strip("/")
        if not path:
            raise ValueError("users_path must not be empty")
        return path

    @model_validator(mode="after")
    def fill_database_url(self) -> "AppConfig":
        """Derive the database URL from the project id when not configured."""
        if not self.firebase_database_url:
            self.firebase_database_url = default_database_url(self.firebase_project_id)
        return self

    @property
    def database_url(self) -> str:
        """Realtime database base URL without a trailing slash."""
        url = self.firebase_database_url or default_database_url(self.firebase_project_id)
        return url.rstrip("/")

    @property
    def auth_token(self) -> str | None:
        """Token for the auth query parameter, or None for unauthenticated access."""
        if not self.firebase_auth_token or not self.firebase_auth_token.strip():
            return None
        return self.firebase_auth_token.strip()

    @classmethod
    def for_testing(cls, **overrides: Any) -> "AppConfig":
        """Build a configuration that ignores any local .env file."""
        return cls(_env_file=None, **overrides)
