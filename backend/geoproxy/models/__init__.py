"""Data models and error types."""

from .core import (
    CacheEntry,
    GeoRequest,
    GoogleGeoResponse,
    GoogleLocation,
    LocationResponse,
    LocationResult,
    WifiAccessPoint,
)
from .errors import GeoProxyError, RateLimited, TransportError, UpstreamError

__all__ = [
    "CacheEntry",
    "GeoRequest",
    "GoogleGeoResponse",
    "GoogleLocation",
    "LocationResponse",
    "LocationResult",
    "WifiAccessPoint",
    "GeoProxyError",
    "RateLimited",
    "TransportError",
    "UpstreamError",
]
