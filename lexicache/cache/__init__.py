"""
Translation caches.

- BoundedTTLCache → in-memory LRU with TTL (default)
- HybridPersistentCache → memory LRU backed by an optional durable store
"""

from lexicache.cache.base import CacheAdapter, DEFAULT_CACHE_SIZE, DEFAULT_TTL_HOURS
from lexicache.cache.memory import BoundedTTLCache, CacheEntry
from lexicache.cache.hybrid import HybridPersistentCache

__all__ = [
    "CacheAdapter",
    "CacheEntry",
    "BoundedTTLCache",
    "HybridPersistentCache",
    "DEFAULT_CACHE_SIZE",
    "DEFAULT_TTL_HOURS",
]
