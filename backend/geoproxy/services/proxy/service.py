"""Request orchestration: cache, rate limit, then the provider.

Per request:
1. A fresh cached location is returned immediately (no quota used).
2. Otherwise the client must be admitted by the daily rate limiter.
   Admission is recorded before the provider call, so a failed call
   still uses one unit of quota.
3. The provider is called once. Only a successful result is cached.
"""

import logging
import time
from collections.abc import Callable

from geoproxy.config import Settings
from geoproxy.models import (
    CacheEntry,
    GeoRequest,
    LocationResult,
    RateLimited,
    TransportError,
    UpstreamError,
)
from geoproxy.services.geolocation import GeolocationService
from geoproxy.utils import DAY_SECONDS, Admission, LocationCache, SlidingWindowRateLimiter

logger = logging.getLogger(__name__)


class GeoProxyService:
    """Resolves WiFi scans for clients, applying the cache and rate limit.

    The cache and rate limiter are shared by all concurrent requests and
    handle their own locking; this class holds no mutable state of its own.
    """

    def __init__(
        self,
        settings: Settings,
        geolocation: GeolocationService,
        cache: LocationCache | None = None,
        rate_limiter: SlidingWindowRateLimiter | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._settings = settings
        self._geolocation = geolocation
        self._cache = cache if cache is not None else LocationCache()
        self._rate_limiter = rate_limiter if rate_limiter is not None else SlidingWindowRateLimiter()
        self._clock = clock

    @property
    def cache(self) -> LocationCache:
        return self._cache

    @property
    def rate_limiter(self) -> SlidingWindowRateLimiter:
        return self._rate_limiter

    async def resolve(self, client_key: str, request: GeoRequest) -> LocationResult:
        """Return a location for ``client_key``'s scan.

        Raises:
            RateLimited: The client has no quota left in the trailing 24 hours.
            UpstreamError: The provider rejected the request.
            TransportError: The provider could not be reached or decoded.
        """
        now = self._clock()

        entry = self._cache.get(client_key)
        if entry is not None and entry.is_fresh(now, self._settings.cache_ttl_seconds):
            logger.info(f"[GEO] {client_key}: cache hit")
            return entry.location

        admission = self._rate_limiter.try_admit(
            client_key,
            now,
            window_seconds=DAY_SECONDS,
            max_count=self._settings.max_requests_per_day,
        )
        if admission is Admission.DENIED:
            logger.warning(f"[GEO] {client_key}: rate limit exceeded")
            raise RateLimited()

        logger.info(
            f"[GEO] {client_key}: calling provider with "
            f"{len(request.wifi_access_points)} access points (considerIp={request.consider_ip})"
        )
        try:
            location = await self._geolocation.locate(
                request.wifi_access_points, request.consider_ip
            )
        except UpstreamError as e:
            logger.error(f"[GEO] {client_key}: provider error {e.status}: {e.message}")
            raise
        except TransportError as e:
            logger.error(f"[GEO] {client_key}: request failed: {e.message}")
            raise

        self._cache.put(client_key, CacheEntry(location=location, recorded_at=now))
        logger.info(f"[GEO] {client_key}: success lat={location.latitude} lon={location.longitude}")
        return location
