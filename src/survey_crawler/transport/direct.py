"""
Direct transport.

Issues requests straight to the survey host with httpx. Redirects are not
followed here; the traversal loop follows them itself so that it can
update its own cookie jar and URL between hops. httpx's built-in cookie
store is emptied after every reply so the loop's jar stays the only
source of the Cookie header.
"""
from __future__ import annotations

import logging
from typing import Optional

import httpx

from ..config import DEFAULT_USER_AGENT
from ..errors import TransportError
from ..models.envelope import PageEnvelope, TransportRequest
from .base import DEFAULT_TIMEOUT_MS, TransportAdapter


__all__ = ["DirectTransport"]

logger = logging.getLogger(__name__)


class DirectTransport(TransportAdapter):
    """
    Transport that requests the survey host directly.

    Attributes:
        user_agent: Added as User-Agent unless the request sets one.
    """

    def __init__(
        self,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        user_agent: str = DEFAULT_USER_AGENT,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        super().__init__(timeout_ms=timeout_ms, client=client)
        self.user_agent = user_agent

    def _create_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout_ms / 1000),
            follow_redirects=False,
        )

    async def send(self, request: TransportRequest) -> PageEnvelope:
        headers = {"User-Agent": self.user_agent, **request.headers}
        logger.debug(f"{request.method.value} {request.url}")

        try:
            response = await self.client.request(
                request.method.value,
                request.url,
                headers=headers,
                content=request.body,
                follow_redirects=False,
            )
        except httpx.TimeoutException as e:
            raise TransportError(f"Request timed out after {self.timeout_ms}ms: {request.url}") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(f"Request failed: {e}") from e
        finally:
            self.client.cookies.clear()

        location = response.headers.get("location") if response.is_redirect else None

        return PageEnvelope(
            http_status=response.status_code,
            redirect_location=location,
            body_html=response.text,
            set_cookie_headers=response.headers.get_list("set-cookie"),
        )
