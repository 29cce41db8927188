"""
In-memory cookie jar for one survey session.

The whole session talks to a single host, so the jar keeps only
name/value pairs: no expiry, domain or path scoping. The latest value for
a name wins; a name keeps its original position when overwritten, which
only affects the order of the serialized Cookie header.

Example Usage:
    >>> jar = CookieJar()
    >>> jar.ingest(["sid=abc; Path=/; HttpOnly", "lang=ja"])
    >>> jar.serialize()
    'sid=abc; lang=ja'
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional


__all__ = ["CookieJar"]

logger = logging.getLogger(__name__)


class CookieJar:
    """Accumulates Set-Cookie values and renders the Cookie request header."""

    def __init__(self) -> None:
        self._cookies: dict[str, str] = {}

    def ingest(self, set_cookie_headers: Iterable[str]) -> None:
        """
        Store cookies from raw Set-Cookie header values.

        Only the part before the first ';' is used. Entries without '='
        or with an empty name are ignored.

        Args:
            set_cookie_headers: Raw header values in received order.
        """
        for header in set_cookie_headers:
            main_part = header.split(";", 1)[0].strip()
            name, sep, value = main_part.partition("=")
            if not sep or not name:
                logger.debug(f"Ignoring malformed Set-Cookie value: {header!r}")
                continue
            self._cookies[name] = value

    def serialize(self) -> str:
        """Render the Cookie header value, or '' when the jar is empty."""
        return "; ".join(f"{name}={value}" for name, value in self._cookies.items())

    def get(self, name: str) -> Optional[str]:
        return self._cookies.get(name)

    def as_dict(self) -> dict[str, str]:
        """Copy of the current cookies."""
        return dict(self._cookies)

    def clear(self) -> None:
        self._cookies.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._cookies

    def __len__(self) -> int:
        return len(self._cookies)

    def __repr__(self) -> str:
        return f"CookieJar({', '.join(self._cookies)})"
