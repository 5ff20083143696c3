"""
Cache Protocol Definition

Defines the interface for all cache implementations.
"""

from typing import Protocol, Optional, Any, Dict, runtime_checkable


@runtime_checkable
class CacheProtocol(Protocol):
    """Protocol for cache implementations."""

    def get(self, key: str) -> Optional[Any]:
        """
        Retrieve a value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None if missing or expired
        """
        ...

    def set(self, key: str, value: Any) -> bool:
        """
        Store a value in cache.

        Args:
            key: Cache key
            value: Value to cache

        Returns:
            True if successful, False otherwise
        """
        ...

    def delete(self, key: str) -> bool:
        """
        Delete a value from cache.

        Returns:
            True if deleted, False otherwise
        """
        ...

    def exists(self, key: str) -> bool:
        """Check if a live key exists in cache."""
        ...

    def clear(self) -> int:
        """
        Clear all cache entries.

        Returns:
            Number of entries cleared
        """
        ...

    def get_stats(self) -> Dict[str, Any]:
        """Hit, miss and size statistics."""
        ...
