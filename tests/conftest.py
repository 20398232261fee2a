"""Shared fixtures for location console tests."""

import pytest

from location_console.domain.models import DatastoreError, DatastoreWriteError
from tests.fakes import FakeDatastore


@pytest.fixture
def fake_datastore() -> FakeDatastore:
    """Create an empty fake datastore."""
    return FakeDatastore()


@pytest.fixture
def failing_write_datastore() -> FakeDatastore:
    """Create a fake datastore that rejects every write."""
    datastore = FakeDatastore()
    datastore.write_error = DatastoreWriteError("permission denied", status_code=401)
    return datastore


@pytest.fixture
def unreachable_datastore() -> FakeDatastore:
    """Create a fake datastore whose reads fail."""
    datastore = FakeDatastore()
    datastore.read_error = DatastoreError("connection refused")
    return datastore
