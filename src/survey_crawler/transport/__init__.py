from .base import TransportAdapter
from .cookies import CookieJar
from .direct import DirectTransport
from .relay import RelayTransport

__all__ = [
    "CookieJar",
    "DirectTransport",
    "RelayTransport",
    "TransportAdapter",
]
