"""Upstream geolocation provider client."""

from .service import GeolocationService, GoogleGeolocationService

__all__ = [
    "GeolocationService",
    "GoogleGeolocationService",
]
