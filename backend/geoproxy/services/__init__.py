"""GeoProxy Services.

Service layer components:
- Geolocation: Google Geolocation API client (httpx)
- Proxy: per-client cache and daily rate limit around the provider call
"""

from .geolocation import GeolocationService, GoogleGeolocationService
from .proxy import GeoProxyService

__all__ = [
    # Geolocation
    "GeolocationService",
    "GoogleGeolocationService",
    # Proxy
    "GeoProxyService",
]
