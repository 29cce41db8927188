"""
Exception hierarchy for the survey crawler.

Every fatal condition of a run is one of these. None of them is retried:
the traversal loop catches them at the top level, reports the message once
through the progress sink and finishes the run as FAILED.
"""
from __future__ import annotations

from typing import Optional


__all__ = [
    "SurveyCrawlerError",
    "TransportError",
    "RejectionLoopError",
    "UnrecognizedPageError",
    "PageLimitError",
]


class SurveyCrawlerError(Exception):
    """Base class for all crawler errors."""


class TransportError(SurveyCrawlerError):
    """
    The transport could not deliver a request or its reply was unusable.

    Covers network failures, timeouts, malformed relay envelopes and
    explicit errors reported by the relay. The message is shown verbatim.
    """


class RejectionLoopError(SurveyCrawlerError):
    """
    The server bounced a submitted init form back to the init page.

    Attributes:
        payload: The url-encoded body that was rejected.
    """

    def __init__(self, payload: Optional[str]) -> None:
        self.payload = payload or ""
        super().__init__(
            "Input data was rejected and the survey returned to the init page "
            f"(submitted: {self.payload})"
        )


class UnrecognizedPageError(SurveyCrawlerError):
    """A page offered no form fields the crawler could submit."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Unable to recognize page content, no submittable fields found at {url}")


class PageLimitError(SurveyCrawlerError):
    """The run used up its request budget without reaching the coupon page."""

    def __init__(self, max_requests: int) -> None:
        self.max_requests = max_requests
        super().__init__(f"Maximum of {max_requests} requests reached without completion")
