"""Core data models for the geolocation proxy.

Pydantic models for the inbound request and response bodies, and plain
dataclasses for the values kept in the in-memory stores.
"""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, StrictBool

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


class WifiAccessPoint(BaseModel):
    """A single access point from a WiFi scan."""

    model_config = ConfigDict(populate_by_name=True)

    mac_address: str = Field(..., alias="macAddress", description="BSSID of the access point")
    signal_strength: int = Field(
        ...,
        alias="signalStrength",
        ge=INT32_MIN,
        le=INT32_MAX,
        description="Signal strength in dBm",
    )


class GeoRequest(BaseModel):
    """Inbound ``POST /geo`` body.

    The same shape is forwarded to the provider, so field aliases match the
    Google Geolocation API names.
    """

    model_config = ConfigDict(populate_by_name=True)

    consider_ip: StrictBool = Field(..., alias="considerIp")
    wifi_access_points: list[WifiAccessPoint] = Field(..., alias="wifiAccessPoints")


class LocationResponse(BaseModel):
    """Outbound ``POST /geo`` success body."""

    lat: float = Field(..., description="Latitude in degrees")
    lon: float = Field(..., description="Longitude in degrees")


@dataclass(frozen=True)
class LocationResult:
    """Provider-independent location result."""

    latitude: float
    longitude: float

    def to_response(self) -> LocationResponse:
        return LocationResponse(lat=self.latitude, lon=self.longitude)


@dataclass(frozen=True)
class CacheEntry:
    """Last known location for a client and when it was recorded."""

    location: LocationResult
    recorded_at: float

    def is_fresh(self, now: float, ttl_seconds: float) -> bool:
        return self.recorded_at + ttl_seconds > now


class GoogleLocation(BaseModel):
    """``location`` object of a Google Geolocation API response."""

    model_config = ConfigDict(strict=True, allow_inf_nan=False)

    lat: float
    lng: float


class GoogleGeoResponse(BaseModel):
    """Success body of the Google Geolocation API.

    Strict so that string or boolean coordinates and NaN/Infinity are
    rejected instead of coerced into a cached location.
    """

    model_config = ConfigDict(strict=True, allow_inf_nan=False)

    location: GoogleLocation
    accuracy: float

    def to_result(self) -> LocationResult:
        return LocationResult(latitude=self.location.lat, longitude=self.location.lng)
