"""Time-bounded in-memory cache with lazy expiry"""

import time
from typing import Callable, Dict, Generic, Optional, TypeVar

from .models import CacheEntry, CacheCounts

K = TypeVar("K")
V = TypeVar("V")


class TimedCache(Generic[K, V]):
    """Key/value store where every entry expires a fixed time after insertion.

    Expired entries are never purged in the background; they are treated as
    absent on read and stay in place until overwritten or cleared. Keys are
    used exactly as given, so callers normalize them first.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.time):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[K, CacheEntry] = {}

    def _is_valid(self, entry: CacheEntry, now: float) -> bool:
        return (now - entry.stored_at) < self.ttl_seconds

    def get(self, key: K) -> Optional[V]:
        """Return the value for key if present and still fresh, else None"""
        entry = self._entries.get(key)
        if entry is None or not self._is_valid(entry, self._clock()):
            return None
        return entry.value

    def set(self, key: K, value: V) -> None:
        """Store value under key, replacing any previous entry"""
        self._entries[key] = CacheEntry(value=value, stored_at=self._clock())

    def clear(self) -> None:
        self._entries.clear()

    def stats(self) -> CacheCounts:
        """Count valid and expired entries as of now"""
        now = self._clock()
        valid = sum(1 for entry in self._entries.values() if self._is_valid(entry, now))
        return CacheCounts(
            total=len(self._entries),
            valid=valid,
            expired=len(self._entries) - valid
        )

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        # Physical presence, stale entries included
        return key in self._entries
