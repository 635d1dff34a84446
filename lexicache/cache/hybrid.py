"""
Hybrid cache: fast in-memory LRU in front of an optional durable store.

Reads are always answered from memory. A memory miss starts a background
read from the durable store that warms memory for the *next* lookup; the
current lookup still reports a miss. Writes go to memory synchronously and
to the durable store in the background.

All durable-store failures are logged and absorbed. The cache never raises
because persistence is unavailable or corrupt; it degrades to a miss.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Coroutine

from pydantic import ValidationError

from lexicache.cache.base import CacheAdapter, DEFAULT_CACHE_SIZE, DEFAULT_TTL_HOURS
from lexicache.cache.memory import BoundedTTLCache
from lexicache.core.models import CacheRecord
from lexicache.core.utils import Clock, to_millis
from lexicache.storage.base import DurableStore

logger = logging.getLogger(__name__)


DEFAULT_PREFIX = "lexicache_"
DEFAULT_PRELOAD_ITEMS = 50


class HybridPersistentCache(CacheAdapter):
    """
    Two-tier translation cache.

    Usage:
        store = JsonFileDurableStore("~/.cache/app/translations.json")
        cache = HybridPersistentCache(store=store)

        await cache.preload()      # at startup
        cache.set(key, "Bonjour")
        cache.get(key)             # -> "Bonjour"

    Passing ``store=None`` gives a memory-only cache with the same API.
    """

    def __init__(
        self,
        max_memory_entries: int = DEFAULT_CACHE_SIZE,
        ttl_hours: float = DEFAULT_TTL_HOURS,
        store: DurableStore | None = None,
        prefix: str = DEFAULT_PREFIX,
        clock: Clock = time.time,
    ):
        self._memory = BoundedTTLCache(max_memory_entries, ttl_hours, clock=clock)
        self._ttl_ms = to_millis(self._memory.ttl)
        self._store = store
        self._prefix = prefix
        self._clock = clock
        self._pending: set[asyncio.Task] = set()

        if store is not None:
            logger.info(f"Persistent translation cache enabled ({type(store).__name__})")
        else:
            logger.info("No durable store configured, using memory-only translation cache")

    @property
    def persistent(self) -> bool:
        return self._store is not None

    @property
    def max_entries(self) -> int:
        return self._memory.max_entries

    @property
    def pending_operations(self) -> int:
        return len(self._pending)

    # -------------------------------------------------------------------------
    # Cache API
    # -------------------------------------------------------------------------

    def get(self, key: str) -> str | None:
        value = self._memory.get(key)
        if value is not None:
            return value

        if self._store is not None:
            self._spawn(self._load_from_store(key))
        return None

    def set(self, key: str, value: str) -> None:
        self._memory.set(key, value, on_evicted=self._on_evicted)

        if self._store is not None:
            self._spawn(self._save_to_store(key, value))

    def clear(self) -> None:
        self._memory.clear()

        if self._store is not None:
            self._spawn(self._clear_store())

    def size(self) -> int:
        return self._memory.size()

    def stats(self) -> dict[str, Any]:
        """Statistics about both tiers."""
        return {
            "memory": self._memory.size(),
            "persistent": self.persistent,
        }

    async def preload(self, max_items: int = DEFAULT_PRELOAD_ITEMS) -> int:
        """
        Warm the memory tier from the durable store.

        Call once during application start-up. Reads at most ``max_items``
        records; expired or unreadable records are deleted from the store.

        Returns:
            Number of entries loaded into memory
        """
        if self._store is None:
            return 0

        try:
            keys = [k for k in await self._store.get_all_keys() if k.startswith(self._prefix)]
            keys = keys[:max_items]
            if not keys:
                return 0
            items = await self._store.multi_get(keys)
        except Exception as e:
            logger.warning(f"Error preloading translation cache: {e}")
            return 0

        now = self._clock()
        loaded = 0
        stale: list[str] = []

        for full_key, data in items:
            if data is None:
                continue
            record = self._parse(full_key, data)
            if record is None or self._is_expired(record, now):
                stale.append(full_key)
                continue
            self._memory.set(full_key[len(self._prefix):], record.value, on_evicted=self._on_evicted)
            loaded += 1

        if stale:
            try:
                await self._store.multi_remove(stale)
            except Exception as e:
                logger.warning(f"Error removing {len(stale)} stale cache records: {e}")

        if loaded:
            logger.info(f"Preloaded {loaded} cache entries from durable store")
        return loaded

    async def wait_pending(self) -> None:
        """Wait for every background durable-store operation to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    # -------------------------------------------------------------------------
    # Durable tier (background)
    # -------------------------------------------------------------------------

    def _storage_key(self, key: str) -> str:
        return self._prefix + key

    def _is_expired(self, record: CacheRecord, now: float) -> bool:
        return to_millis(now) - record.timestamp > self._ttl_ms

    def _parse(self, full_key: str, data: str) -> CacheRecord | None:
        try:
            return CacheRecord.model_validate_json(data)
        except ValidationError as e:
            logger.warning(f"Malformed cache record {full_key}: {e.error_count()} errors")
            return None

    def _on_evicted(self, key: str) -> None:
        """Keep the durable tier in step with memory evictions."""
        if self._store is not None:
            self._spawn(self._remove_from_store(key))

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop: durable tier is skipped for this operation
            coro.close()
            logger.debug("No running event loop, skipping durable cache operation")
            return

        task = loop.create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _load_from_store(self, key: str) -> None:
        full_key = self._storage_key(key)
        try:
            data = await self._store.get_item(full_key)
            if data is None:
                return

            record = self._parse(full_key, data)
            if record is None or self._is_expired(record, self._clock()):
                await self._store.remove_item(full_key)
                return

            # A newer value may have been set while we were reading
            if self._memory.get(key) is None:
                self._memory.set(key, record.value, on_evicted=self._on_evicted)
                logger.debug(f"Warmed memory cache from durable store: {key}")
        except Exception as e:
            logger.warning(f"Error reading from durable cache: {e}")

    async def _save_to_store(self, key: str, value: str) -> None:
        record = CacheRecord(value=value, timestamp=to_millis(self._clock()))
        try:
            await self._store.set_item(self._storage_key(key), record.model_dump_json())
        except Exception as e:
            logger.warning(f"Error writing to durable cache: {e}")

    async def _remove_from_store(self, key: str) -> None:
        try:
            await self._store.remove_item(self._storage_key(key))
        except Exception as e:
            logger.warning(f"Error removing from durable cache: {e}")

    async def _clear_store(self) -> None:
        try:
            keys = [k for k in await self._store.get_all_keys() if k.startswith(self._prefix)]
            if keys:
                await self._store.multi_remove(keys)
        except Exception as e:
            logger.warning(f"Error clearing durable cache: {e}")
