"""In-memory stores shared across requests."""

from .cache import LocationCache
from .rate_limit import DAY_SECONDS, Admission, SlidingWindowRateLimiter

__all__ = [
    "LocationCache",
    "DAY_SECONDS",
    "Admission",
    "SlidingWindowRateLimiter",
]
