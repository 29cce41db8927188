from __future__ import annotations

from typing import TYPE_CHECKING, Optional
from urllib.parse import urljoin

from pydantic import BaseModel, Field

from ..transport.cookies import CookieJar
from .envelope import HttpMethod, TransportRequest


if TYPE_CHECKING:
    from .page_kind import FormSubmission


__all__ = ["Session", "FORM_CONTENT_TYPE"]


FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class Session(BaseModel):
    """
    Mutable state of one survey run.

    Owned by the traversal loop for the lifetime of the run. The pending
    body is set if and only if the method is POST; the two mutators
    follow_redirect() and advance() keep that invariant.

    Attributes:
        current_url: Absolute URL of the next request.
        method: Method of the next request.
        pending_body: Url-encoded body of the next request (POST only).
        cookies: Cookies collected so far.
        page_counter: Pages parsed so far (diagnostics only).
        requests_sent: Requests sent so far, redirects included.
    """
    current_url: str = Field(description="Absolute URL of the next request")
    method: HttpMethod = Field(default=HttpMethod.GET, description="Next request method")
    pending_body: Optional[str] = Field(default=None, description="Next request body")
    cookies: CookieJar = Field(default_factory=CookieJar, description="Session cookies")
    page_counter: int = Field(default=0, ge=0, description="Pages parsed")
    requests_sent: int = Field(default=0, ge=0, description="Requests sent")

    model_config = {"arbitrary_types_allowed": True}

    def request_headers(self) -> dict[str, str]:
        """Headers for the next request: Cookie, Referer and Content-Type."""
        headers: dict[str, str] = {}
        cookie_header = self.cookies.serialize()
        if cookie_header:
            headers["Cookie"] = cookie_header
        headers["Referer"] = self.current_url
        if self.method is HttpMethod.POST:
            headers["Content-Type"] = FORM_CONTENT_TYPE
        return headers

    def build_request(self) -> TransportRequest:
        """Assemble the next request from the current state."""
        return TransportRequest(
            url=self.current_url,
            method=self.method,
            headers=self.request_headers(),
            body=self.pending_body,
        )

    def follow_redirect(self, location: str) -> str:
        """
        Move to a redirect target.

        The location may be relative; it is resolved against the current
        URL. The next request is a bodiless GET.

        Returns:
            The new absolute URL.
        """
        self.current_url = urljoin(self.current_url, location)
        self.method = HttpMethod.GET
        self.pending_body = None
        return self.current_url

    def advance(self, submission: "FormSubmission") -> None:
        """Queue a synthesized form as the next request to the current URL."""
        self.method = submission.method
        self.pending_body = submission.body if submission.method is HttpMethod.POST else None
