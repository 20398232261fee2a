"""Tests for LocationsLiveView helpers and event handling."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from location_console.adapters.config import AppConfig
from location_console.adapters.web.state import LocationsState, State
from location_console.adapters.web.sync import RealtimeLocationSync
from location_console.adapters.web.updaters import StateUpdater
from location_console.adapters.web.views.locations.locations import (
    LocationsLiveView,
    _payload_value,
    create_locations_live_view,
)
from location_console.application.services import LocationNormalizer
from location_console.domain.contracts.state_broadcaster import LOCATIONS_UPDATED
from location_console.domain.models import (
    ConnectionStatus,
    DatastoreWriteError,
    LocationNotFoundError,
    LocationRecord,
    OperationResult,
)
from tests.fakes import FakeDatastore

NOW_MS = 1_700_000_000_000


def _create_test_view(
    admin_service: MagicMock | None = None, sync: MagicMock | None = None
) -> LocationsLiveView:
    """Create a test LocationsLiveView instance."""
    state_manager = State()
    state_manager.location_sync = sync
    if admin_service is None:
        admin_service = MagicMock()
    return LocationsLiveView(state_manager, admin_service, AppConfig.for_testing())


def _socket_with(*usernames: str) -> MagicMock:
    socket = MagicMock()
    socket.context = LocationsState(
        records=[
            LocationRecord(username=name, latitude=1.5, longitude=2.5, timestamp=NOW_MS)
            for name in usernames
        ]
    )
    return socket


def _mock_sync(realtime_enabled: bool) -> MagicMock:
    sync = MagicMock()
    sync.realtime_enabled = realtime_enabled
    sync.is_subscribed = realtime_enabled
    sync.set_realtime_enabled = AsyncMock()
    sync.refresh = AsyncMock(return_value=True)
    return sync


@pytest.mark.parametrize(
    ("payload", "expected"),
    [
        ({"q": ["ali"]}, "ali"),
        ({"q": "bob"}, "bob"),
        ({"q": []}, ""),
        ({}, ""),
        (None, ""),
    ],
)
def test_payload_value(payload: object, expected: str) -> None:
    """Given form or click payloads, when extracting a value, then a plain string is returned."""
    assert _payload_value(payload, "q") == expected


def test_view_rejects_wrong_config_type() -> None:
    """Given a non-AppConfig, when creating the view, then a TypeError is raised."""
    with pytest.raises(TypeError):
        LocationsLiveView(State(), MagicMock(), {"title": "x"})  # type: ignore[arg-type]


def test_build_template_assigns_with_notification() -> None:
    """Given a failed notification, when building assigns, then it renders as an error."""
    view = _create_test_view()
    state = LocationsState(
        connection_status=ConnectionStatus.CONNECTED,
        realtime_enabled=False,
        notification=OperationResult.failed("Error", "boom"),
    )

    assigns = view._build_template_assigns(state, {"users": []})

    assert assigns["users"] == []
    assert assigns["connection_status"] == "connected"
    assert assigns["realtime_label"] == "Real-time Off"
    assert assigns["update_time"] == "Never"
    assert assigns["has_notification"] is True
    assert assigns["notification_kind"] == "error"
    assert assigns["notification_message"] == "boom"


@pytest.mark.asyncio
async def test_search_toggle_and_select_are_per_socket() -> None:
    """Given local UI events, when handled, then only the socket context changes."""
    view = _create_test_view()
    socket = _socket_with("alice")

    await view.handle_event("search", {"q": ["ali"]}, socket)
    await view.handle_event("toggle-online", {}, socket)
    await view.handle_event("select", {"username": "alice"}, socket)

    assert socket.context.search_query == "ali"
    assert socket.context.show_online_only is True
    assert socket.context.selected_username == "alice"
    assert view.state_manager.locations_state.search_query == ""

    await view.handle_event("select", {"username": "alice"}, socket)
    assert socket.context.selected_username is None


@pytest.mark.asyncio
async def test_delete_success_clears_selection() -> None:
    """Given a listed user, when deleting, then the admin service is called with its record."""
    admin_service = MagicMock()
    admin_service.delete_matching = AsyncMock(return_value="k1")
    view = _create_test_view(admin_service)
    socket = _socket_with("alice")
    socket.context.selected_username = "alice"

    await view.handle_event("delete", {"username": "alice"}, socket)

    target = admin_service.delete_matching.call_args.args[0]
    assert (target.username, target.latitude, target.longitude) == ("alice", 1.5, 2.5)
    assert socket.context.selected_username is None
    assert socket.context.notification.title == "User Deleted"
    assert socket.context.notification.message == "Removed alice from the database"


@pytest.mark.asyncio
async def test_delete_not_found_reports_error() -> None:
    """Given no matching entry, when deleting, then an error notification is shown."""
    admin_service = MagicMock()
    admin_service.delete_matching = AsyncMock(
        side_effect=LocationNotFoundError("alice", 1.5, 2.5)
    )
    view = _create_test_view(admin_service)
    socket = _socket_with("alice")

    await view.handle_event("delete", {"username": "alice"}, socket)

    assert socket.context.notification.success is False
    assert socket.context.notification.message == "Could not find user in database"


@pytest.mark.asyncio
async def test_delete_unknown_username_skips_datastore() -> None:
    """Given a username not in the projection, when deleting, then nothing is written."""
    admin_service = MagicMock()
    admin_service.delete_matching = AsyncMock()
    view = _create_test_view(admin_service)
    socket = _socket_with("alice")

    await view.handle_event("delete", {"username": "ghost"}, socket)

    admin_service.delete_matching.assert_not_called()
    assert socket.context.notification.success is False


@pytest.mark.asyncio
async def test_delete_write_failure_reports_error() -> None:
    """Given a rejected write, when deleting, then the failure message is shown."""
    admin_service = MagicMock()
    admin_service.delete_matching = AsyncMock(side_effect=DatastoreWriteError("denied", 401))
    view = _create_test_view(admin_service)
    socket = _socket_with("alice")

    await view.handle_event("delete", {"username": "alice"}, socket)

    assert socket.context.notification.title == "Delete Failed"
    assert socket.context.notification.message == "Failed to delete user: denied"


@pytest.mark.asyncio
async def test_seed_and_clear_notifications() -> None:
    """Given a working admin service, when seeding and clearing, then success is reported."""
    admin_service = MagicMock()
    admin_service.seed_test_data = AsyncMock(return_value=["test_user1", "test_user2"])
    admin_service.clear_all = AsyncMock()
    view = _create_test_view(admin_service)
    socket = _socket_with()

    await view.handle_event("seed", {}, socket)
    assert socket.context.notification.message == "Added 2 test users to Firebase for testing"

    await view.handle_event("clear", {}, socket)
    assert socket.context.notification.title == "Data Cleared"

    await view.handle_event("dismiss", {}, socket)
    assert socket.context.notification is None


@pytest.mark.asyncio
async def test_seed_failure_reports_error() -> None:
    """Given a failing datastore, when seeding, then an error notification is shown."""
    admin_service = MagicMock()
    admin_service.seed_test_data = AsyncMock(side_effect=DatastoreWriteError("denied", 401))
    view = _create_test_view(admin_service)
    socket = _socket_with()

    await view.handle_event("seed", {}, socket)

    assert socket.context.notification.message == "Failed to add test data: denied"


@pytest.mark.asyncio
async def test_toggle_realtime_flips_sync_mode() -> None:
    """Given realtime on, when toggling, then the sync is switched off."""
    sync = _mock_sync(realtime_enabled=True)
    view = _create_test_view(sync=sync)
    socket = _socket_with()

    await view.handle_event("toggle-realtime", {}, socket)

    sync.set_realtime_enabled.assert_awaited_once_with(False)
    assert socket.context.notification.title == "Real-time Disabled"


@pytest.mark.asyncio
async def test_refresh_while_realtime_is_informational() -> None:
    """Given a live subscription, when refreshing, then no fetch happens."""
    sync = _mock_sync(realtime_enabled=True)
    view = _create_test_view(sync=sync)
    socket = _socket_with()

    await view.handle_event("refresh", {}, socket)

    sync.refresh.assert_not_called()
    assert socket.context.notification.title == "Real-time Active"


@pytest.mark.asyncio
async def test_refresh_without_realtime_fetches() -> None:
    """Given realtime off, when refreshing, then the sync fetches once."""
    sync = _mock_sync(realtime_enabled=False)
    view = _create_test_view(sync=sync)
    view.state_manager.locations_state.records = [
        LocationRecord(username="bob", latitude=3.0, longitude=4.0, timestamp=NOW_MS)
    ]
    socket = _socket_with("alice")

    await view.handle_event("refresh", {}, socket)

    sync.refresh.assert_awaited_once()
    assert socket.context.notification.title == "Locations Refreshed"
    assert [r.username for r in socket.context.records] == ["bob"]


@pytest.mark.asyncio
async def test_refresh_without_sync_reports_error() -> None:
    """Given no running sync, when refreshing, then an error notification is shown."""
    view = _create_test_view()
    socket = _socket_with()

    await view.handle_event("refresh", {}, socket)

    assert socket.context.notification.message == "Location sync is not running"


@pytest.mark.asyncio
async def test_refresh_after_stream_ended_fetches_again() -> None:
    """Given realtime on but the stream ended, when refreshing, then a one-shot read runs."""
    datastore = FakeDatastore(
        {"users": {"k1": {"location": {"username": "bob", "latitude": 3.0, "longitude": 4.0}}}}
    )
    view = _create_test_view()
    state_manager = view.state_manager
    sync = RealtimeLocationSync(
        datastore=datastore,
        normalizer=LocationNormalizer(),
        state_updater=StateUpdater(state_manager.locations_state),
        state_broadcaster=AsyncMock(),
        broadcast_topic=state_manager.broadcast_topic,
    )
    state_manager.location_sync = sync
    await sync.start()
    datastore.end_stream()
    for _ in range(5):
        await asyncio.sleep(0)
    assert state_manager.locations_state.connection_status is ConnectionStatus.DISCONNECTED
    assert sync.realtime_enabled is True
    socket = _socket_with()

    await view.handle_event("refresh", {}, socket)

    assert datastore.reads == ["users"]
    assert socket.context.notification.title == "Locations Refreshed"
    assert socket.context.connection_status is ConnectionStatus.CONNECTED
    assert [r.username for r in socket.context.records] == ["bob"]


@pytest.mark.asyncio
async def test_handle_info_update_copies_shared_projection() -> None:
    """Given an update message, when handled, then shared data replaces the socket's copy."""
    view = _create_test_view()
    view.state_manager.locations_state.records = [
        LocationRecord(username="carol", latitude=5.0, longitude=6.0, timestamp=NOW_MS)
    ]
    view.state_manager.locations_state.connection_status = ConnectionStatus.CONNECTED
    socket = _socket_with("alice")
    socket.context.search_query = "car"

    await view.handle_info(LOCATIONS_UPDATED, socket)

    assert [r.username for r in socket.context.records] == ["carol"]
    assert socket.context.connection_status is ConnectionStatus.CONNECTED
    assert socket.context.search_query == "car"


def test_factory_returns_configured_class() -> None:
    """Given dependencies, when creating the LiveView class, then it builds without arguments."""
    state_manager = State()
    view_class = create_locations_live_view(state_manager, MagicMock(), AppConfig.for_testing())

    view = view_class()

    assert isinstance(view, LocationsLiveView)
    assert view.state_manager is state_manager
