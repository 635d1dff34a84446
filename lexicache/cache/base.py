"""
Cache adapter interface.

The translation client depends only on this interface, so either the
memory-only cache or the hybrid persistent cache can be injected.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


DEFAULT_CACHE_SIZE = 500
DEFAULT_TTL_HOURS = 1.0


class CacheAdapter(ABC):
    """Synchronous string cache used by the translation client."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Get a cached value, or None on a miss."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Cache a value."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Drop every entry."""
        pass

    @abstractmethod
    def size(self) -> int:
        """Number of entries currently held in memory."""
        pass

    @property
    def max_entries(self) -> int:
        return DEFAULT_CACHE_SIZE
