"""JSON API over the location projection and the admin service."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from location_console.adapters.web.builders import filter_locations
from location_console.domain.models import (
    DatastoreError,
    LocationNotFoundError,
    LocationRecord,
    LocationUpdate,
    current_time_ms,
)

if TYPE_CHECKING:
    from pyview import PyView
    from starlette.requests import Request

    from location_console.adapters.web.state import State
    from location_console.domain.ports import LocationAdmin, LocationRepository

logger = logging.getLogger(__name__)

_TRUTHY = ("1", "true", "yes", "on")


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


class LocationApiRoutes:
    """Registers the /api/locations endpoints and the health check."""

    def __init__(
        self,
        state_manager: State,
        admin_service: LocationAdmin,
        repository: LocationRepository,
    ) -> None:
        """Initialize the API routes.

        Args:
            state_manager: State manager holding the shared projection.
            admin_service: Service for write operations against the datastore.
            repository: Server-side mirror used for single-user lookups.
        """
        self.state_manager = state_manager
        self.admin_service = admin_service
        self.repository = repository

    def routes(self) -> list[Route]:
        """Build the Starlette routes served by this adapter."""
        return [
            Route("/api/locations", self.list_locations, methods=["GET"]),
            Route("/api/locations", self.upsert_location, methods=["POST"]),
            Route("/api/locations", self.delete_location, methods=["DELETE"]),
            Route("/api/locations/{username}", self.get_location, methods=["GET"]),
            Route("/healthz", self.healthz, methods=["GET"]),
        ]

    def register_routes(self, app: PyView) -> None:
        """Register the API routes with the PyView app.

        Args:
            app: The PyView application instance.
        """
        # Before the LiveView catch-all routes
        for route in reversed(self.routes()):
            app.routes.insert(0, route)

    async def _read_json(self, request: Request) -> Any:
        try:
            return await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return None

    async def list_locations(self, request: Request) -> JSONResponse:
        """List the projection, optionally filtered by ?q= and ?online=."""
        now_ms = current_time_ms()
        query = request.query_params.get("q", "")
        online_only = request.query_params.get("online", "").lower() in _TRUTHY
        records = filter_locations(
            self.state_manager.locations_state.records, query, online_only, now_ms
        )
        return JSONResponse([record.to_view(now_ms) for record in records])

    async def get_location(self, request: Request) -> JSONResponse:
        """Get one user's last known location from the server-side mirror."""
        username = request.path_params["username"]
        record = await self.repository.get_user_location(username)
        if record is None:
            return _error(f"No location for user '{username}'", 404)
        return JSONResponse(record.to_view())

    async def upsert_location(self, request: Request) -> JSONResponse:
        """Write a location update through the datastore."""
        body = await self._read_json(request)
        if not isinstance(body, dict):
            return _error("Request body must be a JSON object", 400)
        try:
            update = LocationUpdate.model_validate(body)
        except ValidationError as e:
            return JSONResponse(
                {"error": "Invalid location", "details": e.errors(include_url=False, include_context=False)},
                status_code=400,
            )

        try:
            record = await self.admin_service.upsert(update)
        except DatastoreError as e:
            logger.error(f"Upsert failed for {update.username}: {e}")
            return _error(str(e), 502)
        return JSONResponse(record.to_view(), status_code=201)

    async def delete_location(self, request: Request) -> Response:
        """Delete the datastore entry matching username, latitude and longitude."""
        body = await self._read_json(request)
        if not isinstance(body, dict):
            return _error("Request body must be a JSON object", 400)
        try:
            target = LocationRecord.model_validate(
                {key: body.get(key) for key in ("username", "latitude", "longitude")}
            )
        except ValidationError as e:
            return JSONResponse(
                {"error": "Invalid location", "details": e.errors(include_url=False, include_context=False)},
                status_code=400,
            )

        try:
            external_key = await self.admin_service.delete_matching(target)
        except LocationNotFoundError as e:
            return _error(str(e), 404)
        except DatastoreError as e:
            logger.error(f"Delete failed for {target.username}: {e}")
            return _error(str(e), 502)
        return JSONResponse({"deleted": external_key})

    async def healthz(self, _request: Request) -> Response:
        """Health check endpoint for load balancers and monitoring."""
        return Response(content="Ok", media_type="text/plain")
