"""
Transport adapter contract.

The traversal loop never talks to the network itself. It hands a
TransportRequest to an adapter and gets a PageEnvelope back, or a
TransportError. How the adapter reaches the survey host (relay, direct
call, proxy) is its own business, as long as it sends the headers it is
given unchanged and reports Set-Cookie and Location faithfully.

Adapters are async context managers that own one httpx.AsyncClient:

    >>> async with RelayTransport("https://relay.example.com") as transport:
    ...     envelope = await transport.send(request)
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

import httpx

from ..models.envelope import PageEnvelope, TransportRequest


if TYPE_CHECKING:
    from types import TracebackType


__all__ = ["TransportAdapter", "DEFAULT_TIMEOUT_MS"]

logger = logging.getLogger(__name__)


DEFAULT_TIMEOUT_MS = 30000


class TransportAdapter(ABC):
    """
    Base class for transports.

    Subclasses implement send(). The client is created on __aenter__ unless
    one was injected, in which case the caller keeps ownership of it.

    Attributes:
        timeout_ms: Per-request timeout in milliseconds.
    """

    def __init__(
        self,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.timeout_ms = timeout_ms
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.AsyncClient:
        """The open HTTP client; raises if the transport was not entered."""
        if self._client is None:
            raise RuntimeError(f"{type(self).__name__} used outside 'async with'")
        return self._client

    def _create_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=httpx.Timeout(self.timeout_ms / 1000))

    async def __aenter__(self) -> "TransportAdapter":
        if self._client is None:
            self._client = self._create_client()
            self._owns_client = True
            logger.debug(f"{type(self).__name__} opened (timeout={self.timeout_ms}ms)")
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional["TracebackType"],
    ) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.debug(f"{type(self).__name__} closed")

    @abstractmethod
    async def send(self, request: TransportRequest) -> PageEnvelope:
        """
        Deliver one request and return the survey host's reply.

        Args:
            request: The request to send.

        Returns:
            PageEnvelope with status, redirect location, body and cookies.

        Raises:
            TransportError: Network failure, timeout or unusable reply.
        """
