"""Google Geolocation API client.

Turns a WiFi scan into a location with a single POST to the provider.

Architecture:
- Shared httpx client with connection pooling, created lazily
- One attempt per call, no retries (callers decide policy)
- Provider failures mapped to UpstreamError / TransportError
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence

import httpx
from pydantic import ValidationError

from geoproxy.config import DEFAULT_GEOLOCATION_API_URL
from geoproxy.models import (
    GoogleGeoResponse,
    LocationResult,
    TransportError,
    UpstreamError,
    WifiAccessPoint,
)

logger = logging.getLogger(__name__)


class GeolocationService(ABC):
    """Abstract base class for the upstream geolocation client."""

    @abstractmethod
    async def locate(
        self, access_points: Sequence[WifiAccessPoint], consider_ip: bool
    ) -> LocationResult:
        """Resolve a WiFi scan to a location.

        Raises:
            UpstreamError: The provider answered with a non-success status.
            TransportError: The call could not be completed or decoded.
        """
        pass

    async def close(self) -> None:
        pass


class GoogleGeolocationService(GeolocationService):
    """Google Geolocation API implementation.

    Attributes:
        _api_key: Provider credential, sent as the ``key`` query parameter.
        _url: Provider endpoint.
        _timeout: Network timeout in seconds for the whole call.
    """

    HEADERS = {
        "User-Agent": "GeoProxy/1.0",
        "Accept": "application/json",
    }

    def __init__(
        self,
        api_key: str,
        url: str = DEFAULT_GEOLOCATION_API_URL,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("api_key not provided")
        self._api_key = api_key
        self._url = url
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the shared HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                headers=self.HEADERS,
                limits=httpx.Limits(max_connections=32, max_keepalive_connections=8),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    @staticmethod
    def build_payload(
        access_points: Sequence[WifiAccessPoint], consider_ip: bool
    ) -> dict:
        return {
            "considerIp": consider_ip,
            "wifiAccessPoints": [
                {"macAddress": ap.mac_address, "signalStrength": ap.signal_strength}
                for ap in access_points
            ],
        }

    async def locate(
        self, access_points: Sequence[WifiAccessPoint], consider_ip: bool
    ) -> LocationResult:
        client = self._get_client()
        payload = self.build_payload(access_points, consider_ip)

        try:
            response = await client.post(
                self._url, params={"key": self._api_key}, json=payload
            )
        except httpx.HTTPError as e:
            # Covers timeouts, connection failures and protocol errors
            raise TransportError(f"{type(e).__name__}: {e}") from e

        if not response.is_success:
            message = f"{response.status_code} {response.reason_phrase}".strip()
            raise UpstreamError(response.status_code, message)

        return self._parse_location(response)

    @staticmethod
    def _parse_location(response: httpx.Response) -> LocationResult:
        """Map ``{"location": {"lat", "lng"}, "accuracy"}`` onto a LocationResult."""
        try:
            geo = GoogleGeoResponse.model_validate_json(response.content)
        except ValidationError as e:
            # Also raised when the body is not JSON at all
            first = e.errors()[0]
            raise TransportError(
                f"invalid provider response: {first['type']} at {first['loc']}: {first['msg']}"
            ) from e

        result = geo.to_result()
        logger.info(
            f"[GEO] Provider located ({result.latitude}, {result.longitude}), "
            f"accuracy={geo.accuracy}"
        )
        return result
