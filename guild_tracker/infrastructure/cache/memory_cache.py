"""
Memory Cache Implementation

In-memory TTL cache. Every entry of an instance shares the same TTL.
"""

import logging
import time
from typing import Optional, Any, Callable, Dict, NamedTuple

from ...core.protocols import CacheProtocol

logger = logging.getLogger(__name__)


class CacheEntry(NamedTuple):
    value: Any
    written_at: float


class TTLCache(CacheProtocol):
    """In-memory cache whose entries expire after a fixed TTL."""

    def __init__(
        self,
        name: str,
        ttl: float,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Args:
            name: Cache name used in logs and statistics
            ttl: Seconds an entry stays readable after it is written
            clock: Monotonic time source
        """
        if ttl <= 0:
            raise ValueError(f"TTL must be positive, got {ttl}")

        self.name = name
        self.ttl = ttl
        self._clock = clock
        self._cache: Dict[str, CacheEntry] = {}
        self._stats = {
            "hits": 0,
            "misses": 0,
            "sets": 0,
            "deletes": 0,
            "expired": 0,
            "flushes": 0
        }

    def _is_expired(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.written_at > self.ttl

    def get(self, key: str) -> Optional[Any]:
        """Value for key, or None when absent or older than the TTL."""
        entry = self._cache.get(key)

        if entry is None:
            self._stats["misses"] += 1
            return None

        if self._is_expired(entry):
            del self._cache[key]
            self._stats["expired"] += 1
            self._stats["misses"] += 1
            return None

        self._stats["hits"] += 1
        return entry.value

    def set(self, key: str, value: Any) -> bool:
        """Store value by reference and restart its TTL."""
        self._cache[key] = CacheEntry(value=value, written_at=self._clock())
        self._stats["sets"] += 1
        return True

    def delete(self, key: str) -> bool:
        """Drop one key; False when it was not cached."""
        if key in self._cache:
            del self._cache[key]
            self._stats["deletes"] += 1
            return True

        return False

    def exists(self, key: str) -> bool:
        """True when key holds an unexpired value."""
        entry = self._cache.get(key)
        if entry is None:
            return False

        if self._is_expired(entry):
            del self._cache[key]
            self._stats["expired"] += 1
            return False

        return True

    def clear(self) -> int:
        """Drop every entry and return how many there were."""
        count = len(self._cache)
        self._cache.clear()
        self._stats["flushes"] += 1

        if count:
            logger.debug(f"Cache '{self.name}' flushed {count} entries")
        return count

    def get_ttl(self, key: str) -> Optional[float]:
        """Seconds left before a key expires."""
        entry = self._cache.get(key)
        if entry is None:
            return None

        remaining = self.ttl - (self._clock() - entry.written_at)
        return remaining if remaining > 0 else None

    def get_stats(self) -> Dict[str, Any]:
        """Counters, live key count and hit rate."""
        total = self._stats["hits"] + self._stats["misses"]
        hit_rate = (
            (self._stats["hits"] / total * 100) if total > 0 else 0.0
        )

        # Sweep so keys counts only live entries
        expired_keys = [
            key for key, entry in self._cache.items()
            if self._is_expired(entry)
        ]
        for key in expired_keys:
            del self._cache[key]
        self._stats["expired"] += len(expired_keys)

        return {
            "name": self.name,
            "ttl": self.ttl,
            "keys": len(self._cache),
            "hits": self._stats["hits"],
            "misses": self._stats["misses"],
            "sets": self._stats["sets"],
            "deletes": self._stats["deletes"],
            "expired": self._stats["expired"],
            "flushes": self._stats["flushes"],
            "hit_rate": round(hit_rate, 2)
        }
