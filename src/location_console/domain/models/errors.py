"""Domain errors."""


class LocationConsoleError(Exception):
    """Base class for errors raised by the location console."""


class DatastoreError(LocationConsoleError):
    """Reading from or subscribing to the realtime datastore failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DatastoreWriteError(DatastoreError):
    """The realtime datastore rejected a write or delete."""


class LocationNotFoundError(LocationConsoleError):
    """No datastore entry matches the location to delete."""

    def __init__(self, username: str, latitude: float, longitude: float) -> None:
        super().__init__(
            f"Could not find location for '{username}' at ({latitude}, {longitude}) in the datastore"
        )
        self.username = username
        self.latitude = latitude
        self.longitude = longitude
