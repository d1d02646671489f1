"""In-memory sliding-window rate limiter.

Each client key owns a deque of admission timestamps guarded by its own
lock, so prune, check and append happen as one step per key while
different keys never wait on each other. The registry lock is only held
long enough to find or create a key's bucket.

Note: state is per process. Restarts reset every window and separate
instances each enforce their own quota.
"""

import threading
from collections import deque
from dataclasses import dataclass, field
from enum import Enum

DAY_SECONDS = 24 * 60 * 60


class Admission(str, Enum):
    """Outcome of a rate limit check."""

    ADMITTED = "admitted"
    DENIED = "denied"


@dataclass
class _Bucket:
    lock: threading.Lock = field(default_factory=threading.Lock)
    hits: deque[float] = field(default_factory=deque)


class SlidingWindowRateLimiter:
    """Per-key sliding-window admission store."""

    def __init__(self) -> None:
        self._buckets: dict[str, _Bucket] = {}
        self._registry_lock = threading.Lock()

    def _bucket(self, key: str) -> _Bucket:
        with self._registry_lock:
            bucket = self._buckets.get(key)
            if bucket is None:
                bucket = self._buckets[key] = _Bucket()
            return bucket

    def try_admit(
        self,
        key: str,
        now: float,
        window_seconds: float = DAY_SECONDS,
        max_count: int = 2,
    ) -> Admission:
        """Admit ``key`` at ``now`` if fewer than ``max_count`` hits fall in the window.

        Timestamps with ``t + window_seconds <= now`` are dropped first. A
        denied attempt keeps the pruned window and does not record ``now``.
        """
        bucket = self._bucket(key)
        with bucket.lock:
            # Callers may read the clock before taking the lock, so hits are
            # not guaranteed to be sorted
            bucket.hits = deque(t for t in bucket.hits if t + window_seconds > now)
            if len(bucket.hits) >= max_count:
                return Admission.DENIED
            bucket.hits.append(now)
            return Admission.ADMITTED

    def recorded(self, key: str) -> list[float]:
        """Return a copy of the timestamps currently stored for ``key``."""
        with self._registry_lock:
            bucket = self._buckets.get(key)
        if bucket is None:
            return []
        with bucket.lock:
            return list(bucket.hits)
