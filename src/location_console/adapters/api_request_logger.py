"""Utility for logging datastore requests when LOCATION_CONSOLE_LOG_REQUESTS is enabled."""

import json
import logging
import os
from typing import Any

logger = logging.getLogger(__name__)

REDACTED = "***REDACTED***"

# Query parameters that carry credentials in realtime database REST calls
_SENSITIVE_PARAMS = {"auth", "access_token"}
_SENSITIVE_HEADERS = {"authorization", "cookie", "x-api-key"}


def should_log_requests() -> bool:
    """Check if request logging is enabled via LOCATION_CONSOLE_LOG_REQUESTS."""
    return os.getenv("LOCATION_CONSOLE_LOG_REQUESTS", "").lower() == "true"


def _redact_params(params: dict[str, Any]) -> dict[str, Any]:
    """Hide credential query parameters."""
    return {k: REDACTED if k.lower() in _SENSITIVE_PARAMS else v for k, v in params.items()}


def _build_url_with_params(url: str, params: dict[str, Any] | None) -> str:
    """Build full URL with query parameters."""
    if not params:
        return url
    param_str = "&".join(f"{k}={v}" for k, v in sorted(_redact_params(params).items()))
    return f"{url}?{param_str}" if "?" not in url else f"{url}&{param_str}"


def _redact_sensitive_headers(headers: dict[str, str]) -> dict[str, str]:
    """Redact sensitive headers from logging."""
    return {k: REDACTED if k.lower() in _SENSITIVE_HEADERS else v for k, v in headers.items()}


def _format_payload(payload: Any) -> str:
    """Format payload for logging."""
    try:
        return json.dumps(payload, indent=2) if isinstance(payload, dict) else str(payload)
    except (TypeError, ValueError):
        return str(payload)


def log_api_request(
    method: str,
    url: str,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    payload: Any = None,
) -> None:
    """Log datastore request details if LOCATION_CONSOLE_LOG_REQUESTS is enabled.

    Args:
        method: HTTP method (GET, PUT, DELETE).
        url: Request URL.
        params: Query parameters (optional, credentials are redacted).
        headers: Request headers (optional, sensitive headers are redacted).
        payload: Request payload/body (optional).
    """
    if not should_log_requests():
        return

    full_url = _build_url_with_params(url, params)
    log_parts = [f"{method} {full_url}"]

    if headers:
        safe_headers = _redact_sensitive_headers(headers)
        log_parts.append(f"Headers: {json.dumps(safe_headers, indent=2)}")

    if payload is not None:
        log_parts.append(f"Payload: {_format_payload(payload)}")

    logger.info("Datastore Request:\n" + "\n".join(log_parts))
