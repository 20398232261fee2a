"""PyView web adapter for the location console."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from location_console.adapters.config import AppConfig
from location_console.domain.ports import (
    DisplayAdapter,
    LocationAdmin,
    LocationNormalizer,
)

from .api_routes import LocationApiRoutes
from .state import State
from .views.locations import create_locations_live_view

if TYPE_CHECKING:
    from location_console.adapters.memory_location_repository import MemLocationRepository
    from location_console.domain.ports import RealtimeDatastore

logger = logging.getLogger(__name__)


class PyViewWebAdapter(DisplayAdapter):
    """PyView-based web adapter serving the dashboard and the JSON API."""

    def __init__(
        self,
        datastore: RealtimeDatastore,
        normalizer: LocationNormalizer,
        admin_service: LocationAdmin,
        repository: MemLocationRepository,
        config: AppConfig,
    ) -> None:
        """Initialize the web adapter.

        Args:
            datastore: The realtime datastore to follow.
            normalizer: Normalizer applied to every snapshot.
            admin_service: Service for write operations against the datastore.
            repository: Server-side mirror of the projection.
            config: Application configuration.
        """
        if not isinstance(config, AppConfig):
            raise TypeError("config must be an AppConfig instance")
        # Protocols can't be checked with isinstance, verify required methods exist
        if not callable(getattr(admin_service, "delete_matching", None)):
            raise TypeError("admin_service must implement LocationAdmin protocol")
        if not callable(getattr(normalizer, "normalize_snapshot", None)):
            raise TypeError("normalizer must implement LocationNormalizer protocol")

        self.datastore = datastore
        self.normalizer = normalizer
        self.admin_service = admin_service
        self.repository = repository
        self.config = config
        self.state = State(route_path="/")
        self._server: Any | None = None

    def build_app(self) -> Any:
        """Create the PyView application with the dashboard and API routes."""
        from markupsafe import Markup
        from pyview import PyView
        from pyview.template import defaultRootTemplate

        app = PyView()
        app.rootTemplate = defaultRootTemplate(
            title=self.config.title,
            title_suffix="",
            css=Markup('<meta name="color-scheme" content="light dark">'),
        )

        live_view_class = create_locations_live_view(self.state, self.admin_service, self.config)
        app.add_live_view(self.state.route_path, live_view_class)
        logger.info(f"Registered locations dashboard at '{self.state.route_path}'")

        LocationApiRoutes(self.state, self.admin_service, self.repository).register_routes(app)
        return app

    async def start(self) -> None:
        """Start the datastore sync and the web server."""
        import uvicorn

        app = self.build_app()
        await self.state.start_sync(self.datastore, self.normalizer, self.config, self.repository)

        config = uvicorn.Config(
            app,
            host=self.config.host,
            port=self.config.port,
            log_level=self.config.log_level.lower(),
        )
        self._server = uvicorn.Server(config)

        await self._server.serve()

    async def stop(self) -> None:
        """Stop the datastore sync and the web server."""
        await self.state.stop_sync()

        if self._server:
            self._server.should_exit = True
