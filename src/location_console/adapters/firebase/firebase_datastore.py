"""Realtime datastore adapter for the Firebase Realtime Database REST API."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, Any

import aiohttp

from location_console.adapters.api_request_logger import log_api_request
from location_console.adapters.firebase.constants import (
    EVENT_AUTH_REVOKED,
    EVENT_CANCEL,
    EVENT_KEEP_ALIVE,
    EVENT_PATCH,
    EVENT_PUT,
    EVENT_STREAM_CONTENT_TYPE,
    REST_SUFFIX,
)
from location_console.adapters.firebase.event_stream import ServerSentEventParser, apply_event
from location_console.domain.models import DatastoreError, DatastoreWriteError
from location_console.domain.ports import RealtimeDatastore

if TYPE_CHECKING:
    from aiohttp import ClientResponse, ClientSession

    from location_console.adapters.config import AppConfig

logger = logging.getLogger(__name__)


class FirebaseRealtimeDatastore(RealtimeDatastore):
    """Reads, writes and streams a Firebase realtime database over HTTP."""

    def __init__(
        self,
        session: ClientSession,
        database_url: str,
        auth_token: str | None = None,
        timeout_seconds: float = 10,
    ) -> None:
        """Initialize the datastore client.

        Args:
            session: Shared aiohttp session.
            database_url: Base URL of the database, e.g. https://<project>-default-rtdb.firebaseio.com
            auth_token: Optional token sent as the ``auth`` query parameter.
            timeout_seconds: Total timeout for reads and writes, connect timeout for streams.
        """
        self._session = session
        self._database_url = database_url.rstrip("/")
        self._auth_token = auth_token
        self._timeout_seconds = timeout_seconds

    @classmethod
    def from_config(cls, session: ClientSession, config: AppConfig) -> FirebaseRealtimeDatastore:
        """Create a datastore client from application configuration."""
        return cls(
            session=session,
            database_url=config.database_url,
            auth_token=config.auth_token,
            timeout_seconds=config.datastore_timeout_seconds,
        )

    def url_for(self, path: str) -> str:
        """Build the REST URL of a node."""
        node = path.strip("/")
        return f"{self._database_url}/{node}{REST_SUFFIX}"

    def _params(self) -> dict[str, str]:
        return {"auth": self._auth_token} if self._auth_token else {}

    async def _error_text(self, response: ClientResponse) -> str:
        text = await response.text()
        return text[:200] if text else "(empty response body)"

    async def read(self, path: str) -> Any:
        """Read the current value at path."""
        url = self.url_for(path)
        params = self._params()
        log_api_request("GET", url, params=params)

        try:
            async with self._session.get(
                url,
                params=params,
                timeout=aiohttp.ClientTimeout(total=self._timeout_seconds),
            ) as response:
                if response.status != 200:
                    error_text = await self._error_text(response)
                    raise DatastoreError(
                        f"Datastore read of '{path}' failed with status {response.status}: "
                        f"{error_text}",
                        status_code=response.status,
                    )
                return await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise DatastoreError(f"Datastore read of '{path}' failed: {e}") from e

    async def write(self, path: str, value: Any | None) -> None:
        """Replace the value at path; None deletes the node."""
        url = self.url_for(path)
        params = self._params()
        method = "DELETE" if value is None else "PUT"
        log_api_request(method, url, params=params, payload=value)

        try:
            async with self._session.request(
                method,
                url,
                params=params,
                json=value,
                timeout=aiohttp.ClientTimeout(total=self._timeout_seconds),
            ) as response:
                if response.status != 200:
                    error_text = await self._error_text(response)
                    raise DatastoreWriteError(
                        f"Datastore {method} of '{path}' failed with status {response.status}: "
                        f"{error_text}",
                        status_code=response.status,
                    )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise DatastoreWriteError(f"Datastore {method} of '{path}' failed: {e}") from e

        logger.debug(f"{method} {path} succeeded")

    async def subscribe(self, path: str) -> AsyncIterator[Any]:
        """Stream the full subtree at path, yielding after every applied change."""
        url = self.url_for(path)
        params = self._params()
        headers = {"Accept": EVENT_STREAM_CONTENT_TYPE}
        log_api_request("GET", url, params=params, headers=headers)

        # Streams stay open indefinitely; only bound the connect phase
        timeout = aiohttp.ClientTimeout(total=None, sock_connect=self._timeout_seconds)
        try:
            async with self._session.get(
                url, params=params, headers=headers, timeout=timeout
            ) as response:
                if response.status != 200:
                    error_text = await self._error_text(response)
                    raise DatastoreError(
                        f"Datastore subscription to '{path}' failed with status "
                        f"{response.status}: {error_text}",
                        status_code=response.status,
                    )

                logger.info(f"Subscribed to datastore path '{path}'")
                parser = ServerSentEventParser()
                tree: Any = None
                async for raw_line in response.content:
                    event = parser.feed_line(raw_line.decode("utf-8"))
                    if event is None or event.event == EVENT_KEEP_ALIVE:
                        continue
                    if event.event in (EVENT_CANCEL, EVENT_AUTH_REVOKED):
                        raise DatastoreError(
                            f"Datastore closed subscription to '{path}': {event.event} {event.data}"
                        )
                    if event.event not in (EVENT_PUT, EVENT_PATCH):
                        logger.debug(f"Ignoring stream event '{event.event}'")
                        continue

                    try:
                        message = json.loads(event.data)
                        tree = apply_event(tree, event.event, message["path"], message["data"])
                    except (ValueError, KeyError, TypeError) as e:
                        raise DatastoreError(f"Malformed stream event on '{path}': {e}") from e
                    yield tree

                logger.info(f"Datastore stream for '{path}' ended")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise DatastoreError(f"Datastore subscription to '{path}' failed: {e}") from e
