"""
Bounded in-memory LRU cache with per-entry TTL.

Expired entries are not swept in the background; they are dropped when
read, or pushed out by LRU pressure like any other entry.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable

from lexicache.cache.base import CacheAdapter, DEFAULT_CACHE_SIZE, DEFAULT_TTL_HOURS
from lexicache.core.utils import Clock


EvictionHook = Callable[[str], None]


@dataclass
class CacheEntry:
    """A cached value and when it was stored (clock seconds)."""

    value: str
    stored_at: float


class BoundedTTLCache(CacheAdapter):
    """
    Fixed-capacity LRU mapping with time-based expiry.

    Usage:
        cache = BoundedTTLCache(max_entries=500, ttl_hours=1)
        cache.set("k", "hola")
        cache.get("k")  # -> "hola"
    """

    def __init__(
        self,
        max_entries: int = DEFAULT_CACHE_SIZE,
        ttl_hours: float = DEFAULT_TTL_HOURS,
        clock: Clock = time.time,
    ):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._max_entries = max_entries
        self._ttl = ttl_hours * 60 * 60
        self._clock = clock

    @property
    def max_entries(self) -> int:
        return self._max_entries

    @property
    def ttl(self) -> float:
        """Time-to-live in seconds."""
        return self._ttl

    def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self._clock() - entry.stored_at > self._ttl:
            del self._entries[key]
            return None

        self._entries.move_to_end(key)
        return entry.value

    def set(self, key: str, value: str, on_evicted: EvictionHook | None = None) -> None:
        """
        Insert or overwrite ``key``.

        When the cache is full and ``key`` is new, the least-recently-used
        entry is removed first and ``on_evicted`` is called with its key.
        """
        if key in self._entries:
            del self._entries[key]
        elif len(self._entries) >= self._max_entries:
            evicted_key, _ = self._entries.popitem(last=False)
            if on_evicted is not None:
                on_evicted(evicted_key)

        self._entries[key] = CacheEntry(value=value, stored_at=self._clock())

    def clear(self) -> None:
        self._entries.clear()

    def size(self) -> int:
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
