"""
Relay transport.

Sends each request through a relay service that performs the outbound
call on our behalf, so cross-origin and TLS concerns live in a separate
hop. The relay speaks a small JSON envelope:

Request (POSTed to the relay endpoint):
    {"url": ..., "method": "GET"|"POST", "headers": {...}, "data": str|null}

Reply:
    {"status": int, "location": str|null, "html": str,
     "set_cookie": [str, ...], "error": str|null}

Example Usage:
    >>> from survey_crawler.transport import RelayTransport
    >>>
    >>> async with RelayTransport("https://relay.example.workers.dev") as relay:
    ...     envelope = await relay.send(session.build_request())
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from ..errors import TransportError
from ..models.envelope import PageEnvelope, TransportRequest
from .base import DEFAULT_TIMEOUT_MS, TransportAdapter


__all__ = ["RelayTransport"]

logger = logging.getLogger(__name__)


class RelayTransport(TransportAdapter):
    """
    Transport that talks to the survey host through a JSON relay.

    Attributes:
        endpoint: Relay URL that accepts the request envelope.
    """

    def __init__(
        self,
        endpoint: str,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """
        Initialize the relay transport.

        Args:
            endpoint: Relay URL.
            timeout_ms: Timeout for the relay round trip in milliseconds.
            client: Optional preconfigured client (not closed by us).
        """
        super().__init__(timeout_ms=timeout_ms, client=client)
        if not endpoint:
            raise ValueError("Relay endpoint is required")
        self.endpoint = endpoint

    async def send(self, request: TransportRequest) -> PageEnvelope:
        payload = {
            "url": request.url,
            "method": request.method.value,
            "headers": request.headers,
            "data": request.body,
        }
        logger.debug(f"Relay {request.method.value} {request.url}")

        try:
            response = await self.client.post(
                self.endpoint,
                json=payload,
                headers={"Accept": "application/json"},
            )
        except httpx.TimeoutException as e:
            raise TransportError(f"Relay request timed out after {self.timeout_ms}ms: {request.url}") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(f"Relay request failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise TransportError(
                f"Relay returned a non-JSON reply (HTTP {response.status_code})"
            ) from e

        if not isinstance(data, dict):
            raise TransportError("Relay returned a malformed envelope")

        if data.get("error"):
            raise TransportError(str(data["error"]))

        if not response.is_success:
            raise TransportError(f"Relay returned HTTP {response.status_code}")

        return self._parse_envelope(data)

    @staticmethod
    def _parse_envelope(data: dict[str, Any]) -> PageEnvelope:
        """Convert a relay reply into a PageEnvelope."""
        status = data.get("status")
        if isinstance(status, bool) or not isinstance(status, int):
            raise TransportError(f"Relay envelope has no valid status: {status!r}")

        set_cookie = data.get("set_cookie") or []
        if isinstance(set_cookie, str):
            set_cookie = [set_cookie]
        elif not isinstance(set_cookie, list):
            raise TransportError("Relay envelope has a malformed set_cookie field")

        location = data.get("location")
        if not (300 <= status < 400) or not isinstance(location, str):
            location = None

        html = data.get("html")
        return PageEnvelope(
            http_status=status,
            redirect_location=location or None,
            body_html=html if isinstance(html, str) else "",
            set_cookie_headers=[str(c) for c in set_cookie],
        )
