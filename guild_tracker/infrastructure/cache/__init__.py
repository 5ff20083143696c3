"""
Cache Infrastructure

Concrete cache implementations.
"""

from .memory_cache import TTLCache
from .tiered_cache import CacheService, RAW, ANALYSIS, EXTERNAL, COMBINED

__all__ = [
    "TTLCache",
    "CacheService",
    "RAW",
    "ANALYSIS",
    "EXTERNAL",
    "COMBINED",
]
