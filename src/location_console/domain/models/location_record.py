"""Location record domain model."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from location_console.domain.models.presence import current_time_ms, is_online


def _coerce_epoch_ms(value: Any) -> Any:
    """Accept integral epoch milliseconds sent as JSON numbers."""
    if isinstance(value, bool):
        raise ValueError("timestamp must be a number of milliseconds")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError("timestamp must be a whole number of milliseconds")
        return int(value)
    return value


class LocationRecord(BaseModel):
    """Last known position of a tracked user.

    Coordinates are strict numbers: strings and booleans are rejected so that
    malformed datastore entries fail validation instead of being coerced.
    Presence is not stored on the record; use is_online() at read time.
    """

    model_config = ConfigDict(frozen=True)

    username: str = Field(min_length=1)
    latitude: float = Field(strict=True)
    longitude: float = Field(strict=True)
    timestamp: int = Field(default_factory=current_time_ms, strict=True)
    accuracy: float | None = Field(default=None, strict=True, ge=0)

    @field_validator("timestamp", mode="before")
    @classmethod
    def validate_timestamp(cls, v: Any) -> Any:
        """Normalize float timestamps that carry an integral value."""
        return _coerce_epoch_ms(v)

    def is_online(self, now_ms: int | None = None) -> bool:
        """Derive presence from the record timestamp."""
        return is_online(self.timestamp, now_ms)

    def matches(self, username: Any, latitude: Any, longitude: Any) -> bool:
        """Check whether raw datastore fields identify this record."""
        return (
            username == self.username and latitude == self.latitude and longitude == self.longitude
        )

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the location object stored in the datastore."""
        payload: dict[str, Any] = {
            "username": self.username,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "timestamp": self.timestamp,
        }
        if self.accuracy is not None:
            payload["accuracy"] = self.accuracy
        return payload

    def to_view(self, now_ms: int | None = None) -> dict[str, Any]:
        """Serialize for clients, including the derived isOnline flag."""
        return {**self.to_wire(), "isOnline": self.is_online(now_ms)}


class LocationUpdate(BaseModel):
    """Writable subset of a location record, as submitted by clients.

    The timestamp is optional here and filled with the current time when the
    update is turned into a record.
    """

    model_config = ConfigDict(frozen=True)

    username: str = Field(min_length=1)
    latitude: float = Field(strict=True)
    longitude: float = Field(strict=True)
    timestamp: int | None = Field(default=None, strict=True)
    accuracy: float | None = Field(default=None, strict=True, ge=0)

    @field_validator("timestamp", mode="before")
    @classmethod
    def validate_timestamp(cls, v: Any) -> Any:
        """Normalize float timestamps that carry an integral value."""
        return _coerce_epoch_ms(v)

    def to_record(self, now_ms: int | None = None) -> LocationRecord:
        """Build a full record, stamping it with now_ms if no timestamp was given."""
        timestamp = self.timestamp
        if timestamp is None:
            timestamp = now_ms if now_ms is not None else current_time_ms()
        return LocationRecord(
            username=self.username,
            latitude=self.latitude,
            longitude=self.longitude,
            timestamp=timestamp,
            accuracy=self.accuracy,
        )
