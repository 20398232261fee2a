"""Locations LiveView for the admin console."""

from __future__ import annotations

import logging
import os
from dataclasses import replace
from datetime import UTC, datetime
from typing import Any

from pyview import LiveView, LiveViewSocket, is_connected
from pyview.events import InfoEvent
from pyview.template.live_template import LiveRender, LiveTemplate
from pyview.vendor import ibis
from pyview.vendor.ibis.loaders import FileReloader

from location_console.adapters.config import AppConfig
from location_console.adapters.web.builders import LocationListBuilder
from location_console.adapters.web.formatters import LocationFormatter
from location_console.adapters.web.state import LocationsState, State
from location_console.domain.contracts.state_broadcaster import LOCATIONS_UPDATED
from location_console.domain.models import (
    DatastoreError,
    LocationNotFoundError,
    LocationRecord,
    OperationResult,
    current_time_ms,
)
from location_console.domain.ports import (
    LocationAdmin,  # noqa: TC001 - Runtime dependency: methods called at runtime
)

logger = logging.getLogger(__name__)


def _payload_value(payload: Any, key: str, default: str = "") -> str:
    """Extract a single value from an event payload.

    Form events arrive as query-string dicts of lists, click events with
    phx-value attributes as plain dicts of strings.
    """
    if not isinstance(payload, dict):
        return default
    value = payload.get(key, default)
    if isinstance(value, list):
        value = value[0] if value else default
    return str(value) if value is not None else default


class LocationsLiveView(LiveView[LocationsState]):
    """LiveView listing user locations with search, filter and admin actions."""

    def __init__(
        self,
        state_manager: State,
        admin_service: LocationAdmin,
        config: AppConfig,
    ) -> None:
        """Initialize the LiveView.

        Args:
            state_manager: State manager holding the shared projection.
            admin_service: Service for write operations against the datastore.
            config: Application configuration.
        """
        super().__init__()
        if not isinstance(config, AppConfig):
            raise TypeError("config must be an AppConfig instance")

        self.state_manager = state_manager
        self.admin_service = admin_service
        self.config = config
        self.formatter = LocationFormatter()
        self.list_builder = LocationListBuilder(self.formatter)

    def _update_context_from_state(self, socket: LiveViewSocket[LocationsState]) -> None:
        """Copy the shared projection into the socket context.

        Per-socket search, filter and selection are left untouched.

        Args:
            socket: The socket connection.
        """
        shared = self.state_manager.locations_state
        socket.context.records = shared.records
        socket.context.last_update = shared.last_update
        socket.context.connection_status = shared.connection_status
        socket.context.realtime_enabled = shared.realtime_enabled
        socket.context.is_loading = shared.is_loading
        logger.info(
            f"Updated context from pubsub message at {datetime.now(UTC)}, "
            f"locations: {len(shared.records)}"
        )

    def _build_template_assigns(
        self, state: LocationsState, template_data: dict[str, Any]
    ) -> dict[str, Any]:
        """Build template assigns dictionary from state and template data.

        Args:
            state: The current locations state.
            template_data: Pre-calculated data from LocationListBuilder.

        Returns:
            Dictionary of template variables for rendering.
        """
        notification = state.notification
        return {
            **template_data,
            "title": str(self.config.title),
            "theme": str(self.config.theme),
            "connection_status": str(state.connection_status),
            "realtime_enabled": state.realtime_enabled,
            "realtime_label": "Real-time On" if state.realtime_enabled else "Real-time Off",
            "is_loading": state.is_loading,
            "search_query": state.search_query,
            "show_online_only": state.show_online_only,
            "update_time": self.formatter.format_update_time(state.last_update),
            "has_notification": notification is not None,
            "notification_title": notification.title if notification else "",
            "notification_message": notification.message if notification else "",
            "notification_kind": (
                "success" if notification is None or notification.success else "error"
            ),
        }

    def _find_record(self, state: LocationsState, username: str) -> LocationRecord | None:
        for record in state.records:
            if record.username == username:
                return record
        return None

    async def mount(self, socket: LiveViewSocket[LocationsState], _session: dict) -> None:
        """Mount the LiveView and register socket for updates."""
        self.state_manager.register_socket(socket)
        socket.context = replace(
            self.state_manager.locations_state,
            search_query="",
            show_online_only=False,
            selected_username=None,
            notification=None,
        )

        if is_connected(socket):
            try:
                await socket.subscribe(self.state_manager.broadcast_topic)
                logger.info(
                    f"Successfully subscribed socket to broadcast topic: {self.state_manager.broadcast_topic}"
                )
            except Exception as e:
                logger.error(
                    f"Failed to subscribe to topic {self.state_manager.broadcast_topic}: {e}",
                    exc_info=True,
                )
        else:
            logger.warning("Socket not connected during mount, will receive updates when connected")

    async def unmount(self, socket: LiveViewSocket[LocationsState]) -> None:
        """Unmount the LiveView and unregister socket."""
        self.state_manager.unregister_socket(socket)

    async def disconnect(self, socket: LiveViewSocket[LocationsState]) -> None:
        """Handle socket disconnection."""
        self.state_manager.unregister_socket(socket)

    async def handle_event(
        self, event: str, payload: Any, socket: LiveViewSocket[LocationsState]
    ) -> None:
        """Handle user interactions from the dashboard."""
        context = socket.context
        if event == "search":
            context.search_query = _payload_value(payload, "q")
        elif event == "toggle-online":
            context.show_online_only = not context.show_online_only
        elif event == "select":
            username = _payload_value(payload, "username")
            context.selected_username = None if username == context.selected_username else username
        elif event == "dismiss":
            context.notification = None
        elif event == "toggle-realtime":
            context.notification = await self._toggle_realtime()
            self._update_context_from_state(socket)
        elif event == "refresh":
            context.notification = await self._refresh()
            self._update_context_from_state(socket)
        elif event == "delete":
            context.notification = await self._delete(context, _payload_value(payload, "username"))
        elif event == "seed":
            context.notification = await self._seed()
        elif event == "clear":
            context.notification = await self._clear()
        else:
            logger.warning(f"Unknown event received: {event}")

    async def _toggle_realtime(self) -> OperationResult:
        sync = self.state_manager.location_sync
        if sync is None:
            return OperationResult.failed("Error", "Location sync is not running")
        enabled = not sync.realtime_enabled
        await sync.set_realtime_enabled(enabled)
        if enabled:
            return OperationResult.ok("Real-time Enabled", "Updates received automatically")
        return OperationResult.ok("Real-time Disabled", "Manual refresh required")

    async def _refresh(self) -> OperationResult:
        sync = self.state_manager.location_sync
        if sync is None:
            return OperationResult.failed("Error", "Location sync is not running")
        # A dropped stream leaves realtime requested but nothing subscribed
        if sync.is_subscribed:
            return OperationResult.ok(
                "Real-time Active", "Locations are automatically updating in real-time"
            )
        if await sync.refresh():
            return OperationResult.ok("Locations Refreshed", "Fetched the latest locations")
        return OperationResult.failed("Refresh Failed", "Could not reach the datastore")

    async def _delete(self, context: LocationsState, username: str) -> OperationResult:
        record = self._find_record(context, username)
        if record is None:
            return OperationResult.failed("Error", "Could not find user in database")
        try:
            await self.admin_service.delete_matching(record)
        except LocationNotFoundError:
            return OperationResult.failed("Error", "Could not find user in database")
        except DatastoreError as e:
            logger.error(f"Delete failed for {username}: {e}")
            return OperationResult.failed("Delete Failed", f"Failed to delete user: {e}")
        if context.selected_username == username:
            context.selected_username = None
        return OperationResult.ok("User Deleted", f"Removed {username} from the database")

    async def _seed(self) -> OperationResult:
        try:
            keys = await self.admin_service.seed_test_data()
        except DatastoreError as e:
            logger.error(f"Seeding test data failed: {e}")
            return OperationResult.failed("Error", f"Failed to add test data: {e}")
        return OperationResult.ok(
            "Test Data Added", f"Added {len(keys)} test users to Firebase for testing"
        )

    async def _clear(self) -> OperationResult:
        try:
            await self.admin_service.clear_all()
        except DatastoreError as e:
            logger.error(f"Clearing data failed: {e}")
            return OperationResult.failed("Error", f"Failed to clear data: {e}")
        return OperationResult.ok("Data Cleared", "Cleared all location data from Firebase")

    async def handle_info(
        self, event: str | InfoEvent, socket: LiveViewSocket[LocationsState]
    ) -> None:
        """Handle update messages from pubsub."""
        if isinstance(event, InfoEvent):
            if event.payload == LOCATIONS_UPDATED:
                self._update_context_from_state(socket)
                return
            logger.debug(f"Received InfoEvent from topic '{event.name}' with payload: {event.payload}")
            return

        if isinstance(event, str):
            if event == LOCATIONS_UPDATED:
                self._update_context_from_state(socket)
                return
            logger.debug(f"Received direct payload: {event}")
            return

        logger.error(
            f"Unexpected event type in handle_info: {type(event)}, "
            f"expected str or InfoEvent, got: {event}"
        )

    async def render(self, assigns: LocationsState | dict, meta: Any) -> str:
        """Render the HTML template."""
        if isinstance(assigns, LocationsState):
            state = assigns
        else:
            state = self.state_manager.locations_state

        try:
            template_data = self.list_builder.build_display_data(
                state.records,
                state.search_query,
                state.show_online_only,
                current_time_ms(),
                state.selected_username,
            )
            template_assigns = self._build_template_assigns(state, template_data)

            current_file_dir = os.path.dirname(os.path.abspath(__file__))
            views_dir = os.path.dirname(current_file_dir)
            if not hasattr(ibis, "loader") or not isinstance(ibis.loader, FileReloader):
                ibis.loader = FileReloader(views_dir)

            template_file = os.path.join(views_dir, "locations", "locations.html")
            with open(template_file, encoding="utf-8") as f:
                template_content = f.read()

            live_template = LiveTemplate(ibis.Template(template_content))
            return LiveRender(live_template, template_assigns, meta)  # type: ignore[no-any-return]
        except Exception as e:
            logger.error(f"Error rendering template: {e}", exc_info=True)
            error_template = ibis.Template("<div>Error rendering template: {{ error }}</div>")
            return LiveRender(LiveTemplate(error_template), {"error": str(e)}, meta)  # type: ignore[no-any-return]


def create_locations_live_view(
    state_manager: State,
    admin_service: LocationAdmin,
    config: AppConfig,
) -> type[LocationsLiveView]:
    """Create a configured LocationsLiveView class.

    PyView's add_live_view expects a class, not an instance, so the
    dependencies are captured in a subclass.

    Args:
        state_manager: State manager holding the shared projection.
        admin_service: Service for write operations against the datastore.
        config: Application configuration.

    Returns:
        A configured LocationsLiveView class that can be registered with PyView.
    """
    captured_state = state_manager
    captured_admin_service = admin_service
    captured_config = config

    class ConfiguredLocationsLiveView(LocationsLiveView):
        """Configured LiveView for the locations dashboard."""

        def __init__(self) -> None:
            super().__init__(captured_state, captured_admin_service, captured_config)

    return ConfiguredLocationsLiveView
