"""Tests for StateUpdater."""

from datetime import UTC, datetime

from location_console.adapters.web.state import LocationsState
from location_console.adapters.web.updaters import StateUpdater
from location_console.domain.models import ConnectionStatus, LocationRecord


def _record(username: str) -> LocationRecord:
    return LocationRecord(username=username, latitude=1.0, longitude=2.0, timestamp=1)


def test_replace_locations_swaps_projection_and_ends_loading() -> None:
    """Given a loading state, when replacing locations, then records are swapped wholesale."""
    state = LocationsState(records=[_record("old")])
    updater = StateUpdater(state)

    updater.replace_locations([_record("a"), _record("b")])

    assert [r.username for r in state.records] == ["a", "b"]
    assert state.is_loading is False


def test_replace_locations_copies_input_list() -> None:
    """Given a list, when replacing locations, then later changes to it do not leak in."""
    state = LocationsState()
    records = [_record("a")]

    StateUpdater(state).replace_locations(records)
    records.append(_record("b"))

    assert len(state.records) == 1


def test_connection_status_connecting_keeps_loading() -> None:
    """Given a connecting status, when updating, then the view stays in loading state."""
    state = LocationsState()
    updater = StateUpdater(state)

    updater.update_connection_status(ConnectionStatus.CONNECTING)
    assert state.is_loading is True

    updater.update_connection_status(ConnectionStatus.DISCONNECTED)
    assert state.connection_status is ConnectionStatus.DISCONNECTED
    assert state.is_loading is False


def test_update_last_update_time_and_realtime_flag() -> None:
    """Given new values, when updating, then they are stored on the state."""
    state = LocationsState()
    updater = StateUpdater(state)
    now = datetime.now(UTC)

    updater.update_last_update_time(now)
    updater.update_realtime_enabled(False)

    assert state.last_update == now
    assert state.realtime_enabled is False
