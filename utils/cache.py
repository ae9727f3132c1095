"""
In-memory response cache with LRU eviction and sliding expiration.

Entries live for `ttl` seconds after their last access; every successful
`get` refreshes that age. Because the TTL is uniform and refreshed on access,
access-recency order is also expiry order, so the oldest entries always sit
at the front of the underlying OrderedDict and purging only has to look
there.
"""

import copy
import logging
import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Optional, Tuple

from config.settings import CACHE_MAX_ENTRIES, CACHE_TTL
from utils.api_models import CacheStats

logger = logging.getLogger("pokedex_gateway.cache")


class ResponseCache:
    """
    Capacity- and time-bounded key/value store.

    Values are deep-copied on the way in and on the way out so callers never
    share a reference with a stored entry. All public methods serialize on a
    single lock and are safe to call from the event loop or from threads.
    """

    def __init__(
        self,
        max_entries: int = CACHE_MAX_ENTRIES,
        ttl: float = CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the cache.

        Args:
            max_entries: Maximum number of live entries before LRU eviction.
            ttl: Seconds an entry survives without being accessed.
            clock: Monotonic time source, injectable for tests.
        """
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        if ttl <= 0:
            raise ValueError("ttl must be positive")

        self.max_entries = max_entries
        self.ttl = ttl
        self._clock = clock
        # key -> (value, last_accessed); ordered least to most recently used
        self._entries: "OrderedDict[str, Tuple[Any, float]]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        """
        Return the cached value for `key`, or None if missing or expired.

        A hit refreshes the entry's age and makes it most recently used.
        """
        with self._lock:
            now = self._clock()
            self._purge_expired(now)

            entry = self._entries.get(key)
            if entry is None:
                return None

            value, _ = entry
            self._entries[key] = (value, now)
            self._entries.move_to_end(key)
            logger.debug("Cache hit", extra={"cache_key": key[:50]})
            return copy.deepcopy(value)

    def set(self, key: str, value: Any) -> None:
        """
        Store `value` under `key`, evicting the least recently used entry
        when the cache is full.
        """
        stored = copy.deepcopy(value)
        with self._lock:
            now = self._clock()
            self._purge_expired(now)

            if key in self._entries:
                self._entries.move_to_end(key)
            self._entries[key] = (stored, now)

            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(
                    "Evicted least recently used entry",
                    extra={"cache_key": evicted[:50]},
                )

    def purge_expired(self) -> int:
        """
        Drop every expired entry.

        Returns:
            Number of entries removed.
        """
        with self._lock:
            return self._purge_expired(self._clock())

    def clear(self) -> None:
        """Remove all entries."""
        with self._lock:
            self._entries.clear()
        logger.info("Cache cleared")

    def stats(self) -> CacheStats:
        """
        Get cache statistics.

        Returns:
            CacheStats with the number of live entries, capacity and TTL.
        """
        with self._lock:
            self._purge_expired(self._clock())
            return {
                "size": len(self._entries),
                "capacity": self.max_entries,
                "ttl": self.ttl,
            }

    def __len__(self) -> int:
        with self._lock:
            self._purge_expired(self._clock())
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        # Liveness check only; does not refresh the entry.
        with self._lock:
            self._purge_expired(self._clock())
            return key in self._entries

    def _purge_expired(self, now: float) -> int:
        """Remove expired entries from the front. Caller must hold the lock."""
        removed = 0
        while self._entries:
            key, (_, last_accessed) = next(iter(self._entries.items()))
            if now - last_accessed < self.ttl:
                break
            del self._entries[key]
            removed += 1

        if removed:
            logger.debug("Purged expired cache entries", extra={"count": removed})
        return removed
