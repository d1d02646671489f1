"""Shared fakes for unit tests: a controllable clock and provider."""

import asyncio
from collections.abc import Sequence

import pytest

from geoproxy.config import Settings
from geoproxy.models import LocationResult, WifiAccessPoint
from geoproxy.services.geolocation import GeolocationService

HOUR = 60 * 60


class FakeClock:
    """Callable clock returning a settable epoch timestamp."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, hours: float = 0, seconds: float = 0) -> None:
        self.now += hours * HOUR + seconds


class FakeGeolocationService(GeolocationService):
    """Provider stand-in that returns queued results or raises queued errors."""

    def __init__(self, default: LocationResult | None = None) -> None:
        self.default = default or LocationResult(latitude=1.0, longitude=2.0)
        self.outcomes: list[LocationResult | Exception] = []
        self.calls: list[tuple[list[WifiAccessPoint], bool]] = []
        self.closed = False

    async def locate(
        self, access_points: Sequence[WifiAccessPoint], consider_ip: bool
    ) -> LocationResult:
        self.calls.append((list(access_points), consider_ip))
        # Yield so concurrent requests interleave at the network call
        await asyncio.sleep(0)
        outcome = self.outcomes.pop(0) if self.outcomes else self.default
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def provider() -> FakeGeolocationService:
    return FakeGeolocationService()


@pytest.fixture
def settings() -> Settings:
    return Settings(google_api_key="test-key", cache_ttl_hours=12, max_requests_per_day=2)
