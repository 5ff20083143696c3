"""
Tiered Cache Service

Four independently expiring caches layered by derivation cost:
raw snapshot < analysis < combined, plus the external roster list.
"""

import logging
import time
from typing import Any, Callable, Dict

from .memory_cache import TTLCache
from ...core.config import CacheConfig

logger = logging.getLogger(__name__)

RAW = "raw"
ANALYSIS = "analysis"
EXTERNAL = "external"
COMBINED = "combined"


class CacheService:
    """Holds the cache tiers and the cross-tier invalidation rules."""

    def __init__(
        self,
        config: CacheConfig,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Initialize the cache tiers.

        Args:
            config: TTL per tier
            clock: Time source shared by every tier
        """
        self.raw = TTLCache(RAW, config.raw_ttl, clock)
        self.analysis = TTLCache(ANALYSIS, config.analysis_ttl, clock)
        self.external = TTLCache(EXTERNAL, config.external_ttl, clock)
        self.combined = TTLCache(COMBINED, config.combined_ttl, clock)

    @property
    def tiers(self) -> Dict[str, TTLCache]:
        return {
            RAW: self.raw,
            ANALYSIS: self.analysis,
            EXTERNAL: self.external,
            COMBINED: self.combined,
        }

    def invalidate_analysis(self) -> None:
        """Flush views derived from member state. The raw tier expires on schedule."""
        self.analysis.clear()
        self.combined.clear()
        logger.debug("Analysis caches invalidated")

    def invalidate_external(self) -> None:
        """Flush the external list and every view that includes it."""
        self.external.clear()
        self.analysis.clear()
        self.combined.clear()
        logger.debug("External caches invalidated")

    def flush_all(self) -> int:
        """Flush every tier, the raw snapshot included."""
        flushed = sum(cache.clear() for cache in self.tiers.values())
        logger.info(f"All caches flushed ({flushed} entries)")
        return flushed

    def get_stats(self) -> Dict[str, Any]:
        """Statistics per tier."""
        return {name: cache.get_stats() for name, cache in self.tiers.items()}
