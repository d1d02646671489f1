"""In-memory per-client location cache.

Process-level store shared by every request handled by this worker.
Entries are never expired here: readers decide freshness against the TTL
and stale entries are simply overwritten on the next successful lookup.
The store therefore grows with the number of distinct clients seen.
"""

import threading

from geoproxy.models import CacheEntry


class LocationCache:
    """Thread-safe mapping of client key to its last known location."""

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> CacheEntry | None:
        with self._lock:
            return self._entries.get(key)

    def put(self, key: str, entry: CacheEntry) -> None:
        with self._lock:
            self._entries[key] = entry

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
