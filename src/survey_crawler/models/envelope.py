from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


__all__ = [
    "HttpMethod",
    "TransportRequest",
    "PageEnvelope",
    "REDIRECT_STATUSES",
]


# Statuses followed as redirects; anything else is parsed as a page
REDIRECT_STATUSES = frozenset({301, 302, 303, 307})


class HttpMethod(str, Enum):
    """Request methods used against the survey host."""
    GET = "GET"
    POST = "POST"


class TransportRequest(BaseModel):
    """
    One logical request handed to a transport adapter.

    Attributes:
        url: Absolute target URL.
        method: GET or POST.
        headers: Headers to send as-is.
        body: Url-encoded form body (POST only).
    """
    url: str = Field(description="Absolute target URL")
    method: HttpMethod = Field(default=HttpMethod.GET, description="Request method")
    headers: dict[str, str] = Field(default_factory=dict, description="Request headers")
    body: Optional[str] = Field(default=None, description="Url-encoded body")

    model_config = {"frozen": True}


class PageEnvelope(BaseModel):
    """
    A transport's reply to one request.

    Consumed once per loop iteration and never modified.

    Attributes:
        http_status: Status code returned by the survey host.
        redirect_location: Location header, kept only for 3xx replies.
        body_html: Response body.
        set_cookie_headers: Raw Set-Cookie values in received order.
    """
    http_status: int = Field(description="HTTP status of the survey host")
    redirect_location: Optional[str] = Field(default=None, description="Location for 3xx replies")
    body_html: str = Field(default="", description="Response body")
    set_cookie_headers: list[str] = Field(default_factory=list, description="Raw Set-Cookie values")

    model_config = {"frozen": True}

    @property
    def is_redirect(self) -> bool:
        """Whether the loop should follow this reply instead of parsing it."""
        return self.http_status in REDIRECT_STATUSES and bool(self.redirect_location)
