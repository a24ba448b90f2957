"""
LRU cache with optional time-to-live.

Entries are stamped with the injected clock on insertion; an entry whose age
has reached the TTL is treated as missing and dropped on access.
"""

import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)

K = TypeVar("K")
V = TypeVar("V")


class LRUCache(Generic[K, V]):
    """
    Thread-safe LRU (Least Recently Used) cache.

    Evicts the least recently used item when the cache is full.
    """

    def __init__(
        self,
        max_size: int = 1000,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the LRU cache.

        Args:
            max_size: Maximum number of items to store in the cache
            ttl_seconds: Time-to-live for cached items (None for no expiration)
            clock: Time source in seconds
        """
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._cache: OrderedDict[K, tuple[V, float]] = OrderedDict()
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._expired = 0

    def _is_expired(self, timestamp: float) -> bool:
        return self.ttl_seconds is not None and self.clock() - timestamp >= self.ttl_seconds

    def get(self, key: K) -> V | None:
        """
        Get an item from the cache.

        Args:
            key: The key to look up

        Returns:
            The cached value if found and not expired, None otherwise
        """
        with self._lock:
            if key not in self._cache:
                self._misses += 1
                logger.debug("Cache miss", key=key)
                return None

            value, timestamp = self._cache[key]
            if self._is_expired(timestamp):
                del self._cache[key]
                self._misses += 1
                self._expired += 1
                logger.debug("Cache miss due to TTL expiration", key=key, age=self.clock() - timestamp)
                return None

            self._cache.move_to_end(key)
            self._hits += 1
            return value

    def put(self, key: K, value: V) -> None:
        """
        Put an item into the cache.

        Args:
            key: The key to store
            value: The value to store
        """
        with self._lock:
            now = self.clock()

            if key in self._cache:
                self._cache[key] = (value, now)
                self._cache.move_to_end(key)
                return

            if len(self._cache) >= self.max_size:
                oldest_key, _ = self._cache.popitem(last=False)
                self._evictions += 1
                logger.debug("Cache eviction", evicted_key=oldest_key, cache_size=len(self._cache))

            self._cache[key] = (value, now)

    def delete(self, key: K) -> bool:
        """Delete an item. Returns True if it was present."""
        with self._lock:
            if key in self._cache:
                del self._cache[key]
                return True
            return False

    def clear(self) -> None:
        """Clear all items from the cache."""
        with self._lock:
            self._cache.clear()
            logger.debug("Cache cleared")

    def size(self) -> int:
        with self._lock:
            return len(self._cache)

    def get_stats(self) -> dict[str, Any]:
        """
        Get cache statistics.

        Returns:
            Dictionary containing cache statistics
        """
        with self._lock:
            total_requests = self._hits + self._misses
            return {
                "size": len(self._cache),
                "max_size": self.max_size,
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
                "expired_count": self._expired,
                "hit_rate": (self._hits / total_requests) if total_requests > 0 else 0.0,
                "ttl_seconds": self.ttl_seconds,
            }

    def get_or_set(self, key: K, factory: Callable[[], V]) -> V:
        """
        Get an item from the cache, or build and store it with factory.

        Args:
            key: The key to look up
            factory: Function called when the key is missing or expired

        Returns:
            The cached value or the result of the factory function
        """
        value = self.get(key)
        if value is None:
            value = factory()
            self.put(key, value)
        return value

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, key: K) -> bool:
        with self._lock:
            if key not in self._cache:
                return False
            _, timestamp = self._cache[key]
            return not self._is_expired(timestamp)

    def __repr__(self) -> str:
        stats = self.get_stats()
        return f"LRUCache(size={stats['size']}, max_size={stats['max_size']}, hit_rate={stats['hit_rate']:.2f})"
