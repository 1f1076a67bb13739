"""
Read-through cache for store queries.

One entry per query shape (all approved launches; per-user submissions by status).
Fresh entries are served without touching the store. On a failed refresh the stale
entry is returned if there is one. Writes never invalidate automatically: callers
clear the keys their mutation affects.
"""
from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300


@dataclass
class CacheEntry:
    data: Any
    timestamp: float


@dataclass
class CacheResult:
    data: Any
    stale: bool = False


class ReadThroughCache:
    """In-process TTL cache with an injected clock (seconds, like time.time)."""

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.time):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def _is_fresh(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.timestamp < self.ttl_seconds

    def peek(self, key: str) -> CacheEntry | None:
        """Entry for key regardless of age, or None."""
        with self._lock:
            return self._entries.get(key)

    def get(self, key: str, loader: Callable[[], Any]) -> Any:
        """
        Return cached data for key if fresh; otherwise call loader and store the result.
        If loader raises and a stale entry exists, return the stale data; else re-raise.
        """
        return self.lookup(key, loader).data

    def lookup(self, key: str, loader: Callable[[], Any]) -> CacheResult:
        """Same as get() but also reports whether the data is a stale fallback."""
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
        if entry is not None and self._is_fresh(entry, now):
            return CacheResult(entry.data, stale=False)

        try:
            data = loader()
        except Exception as e:
            if entry is not None:
                logger.warning("Cache refresh failed for %s; serving stale entry (age %.0fs): %s", key, now - entry.timestamp, e)
                return CacheResult(entry.data, stale=True)
            raise

        with self._lock:
            self._entries[key] = CacheEntry(data=data, timestamp=now)
        return CacheResult(data, stale=False)

    def invalidate(self, key: str | None = None) -> None:
        """Clear one entry, or all entries when key is None."""
        with self._lock:
            if key is None:
                self._entries.clear()
            else:
                self._entries.pop(key, None)

    def invalidate_prefix(self, prefix: str) -> int:
        """Clear every entry whose key starts with prefix (e.g. all status views of one user)."""
        with self._lock:
            keys = [k for k in self._entries if k.startswith(prefix)]
            for k in keys:
                del self._entries[k]
        return len(keys)
