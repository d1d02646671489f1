"""Cache and rate limit orchestration around the provider call."""

from .service import GeoProxyService

__all__ = ["GeoProxyService"]
