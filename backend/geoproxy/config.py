"""Process-wide settings, read once from the environment at startup."""

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_GEOLOCATION_API_URL = "https://www.googleapis.com/geolocation/v1/geolocate"

_ALLOWED_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ConfigError(ValueError):
    """Raised when a required setting is missing."""


def _env_str(name: str, default: str) -> str:
    v = os.getenv(name)
    return v.strip() if v is not None and v.strip() != "" else default


def _env_int(
    name: str, default: int, minimum: int | None = None, maximum: int | None = None
) -> int:
    v = os.getenv(name)
    if v is None:
        return default
    try:
        parsed = int(v.strip())
    except ValueError:
        logger.warning(f"[CONFIG] {name}={v!r} is not an integer, using {default}")
        return default
    if (minimum is not None and parsed < minimum) or (maximum is not None and parsed > maximum):
        logger.warning(f"[CONFIG] {name}={v!r} is out of range, using {default}")
        return default
    return parsed


def _env_float(name: str, default: float) -> float:
    v = os.getenv(name)
    if v is None:
        return default
    try:
        return float(v.strip())
    except ValueError:
        logger.warning(f"[CONFIG] {name}={v!r} is not a number, using {default}")
        return default


@dataclass(frozen=True)
class Settings:
    """Immutable configuration shared by all request handling."""

    google_api_key: str
    cache_ttl_hours: int = 12
    max_requests_per_day: int = 2
    geolocation_api_url: str = DEFAULT_GEOLOCATION_API_URL
    upstream_timeout_s: float = 10.0
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    @property
    def cache_ttl_seconds(self) -> float:
        return self.cache_ttl_hours * 60 * 60

    def __repr__(self) -> str:
        # Keep the credential out of logs and tracebacks
        return (
            f"Settings(cache_ttl_hours={self.cache_ttl_hours}, "
            f"max_requests_per_day={self.max_requests_per_day}, "
            f"geolocation_api_url={self.geolocation_api_url!r}, "
            f"upstream_timeout_s={self.upstream_timeout_s}, "
            f"host={self.host!r}, port={self.port}, log_level={self.log_level!r})"
        )


def load_settings() -> Settings:
    """Build settings from the environment (and a local ``.env`` if present).

    Raises:
        ConfigError: If ``GOOGLE_API_KEY`` is not set.
    """
    # Real environment variables win over .env
    load_dotenv(override=False)

    google_api_key = os.getenv("GOOGLE_API_KEY", "").strip()
    if not google_api_key:
        raise ConfigError("GOOGLE_API_KEY must be set in the environment or .env")

    log_level = _env_str("LOG_LEVEL", "INFO").upper()
    if log_level not in _ALLOWED_LOG_LEVELS:
        log_level = "INFO"

    return Settings(
        google_api_key=google_api_key,
        cache_ttl_hours=_env_int("CACHE_TTL_HOURS", 12),
        max_requests_per_day=_env_int("MAX_REQUESTS_PER_DAY", 2, minimum=0),
        geolocation_api_url=_env_str("GEOLOCATION_API_URL", DEFAULT_GEOLOCATION_API_URL),
        upstream_timeout_s=_env_float("UPSTREAM_TIMEOUT_S", 10.0),
        host=_env_str("HOST", "0.0.0.0"),
        port=_env_int("PORT", 3000, minimum=0, maximum=65535),
        log_level=log_level,
    )
