"""
Local durable store implementations.

These work without any external services: one keeps everything in a dict,
the other persists a single JSON document on the local filesystem.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path

from lexicache.core.exceptions import PersistenceError
from lexicache.storage.base import DurableStore

logger = logging.getLogger(__name__)


# =============================================================================
# In-Memory Store
# =============================================================================


class InMemoryDurableStore(DurableStore):
    """In-memory store for development and tests."""

    def __init__(self, data: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(data or {})

    async def get_item(self, key: str) -> str | None:
        return self._data.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    async def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    async def get_all_keys(self) -> list[str]:
        return list(self._data)

    async def multi_get(self, keys: list[str]) -> list[tuple[str, str | None]]:
        return [(key, self._data.get(key)) for key in keys]

    async def multi_remove(self, keys: list[str]) -> None:
        for key in keys:
            self._data.pop(key, None)


# =============================================================================
# JSON File Store
# =============================================================================


class JsonFileDurableStore(DurableStore):
    """
    Store all keys in one JSON file.

    The file is loaded lazily on first use and rewritten atomically
    (write to a temp file, then replace) after every mutation. Disk I/O
    runs in a worker thread so the event loop is never blocked.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._data: dict[str, str] | None = None
        self._lock = asyncio.Lock()

    def _read_file(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise PersistenceError(f"Cannot read cache file {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceError(f"Cache file {self.path} is not a JSON object")
        return {str(k): str(v) for k, v in data.items()}

    def _write_file(self, data: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            temp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            temp_path.write_text(json.dumps(data), encoding="utf-8")
            os.replace(temp_path, self.path)
        except OSError as e:
            raise PersistenceError(f"Cannot write cache file {self.path}: {e}") from e

    async def _load(self) -> dict[str, str]:
        if self._data is None:
            self._data = await asyncio.to_thread(self._read_file)
            logger.debug(f"Loaded {len(self._data)} keys from {self.path}")
        return self._data

    async def _save(self) -> None:
        snapshot = dict(self._data or {})
        await asyncio.to_thread(self._write_file, snapshot)

    async def get_item(self, key: str) -> str | None:
        async with self._lock:
            data = await self._load()
            return data.get(key)

    async def set_item(self, key: str, value: str) -> None:
        async with self._lock:
            data = await self._load()
            data[key] = value
            await self._save()

    async def remove_item(self, key: str) -> None:
        async with self._lock:
            data = await self._load()
            if data.pop(key, None) is not None:
                await self._save()

    async def get_all_keys(self) -> list[str]:
        async with self._lock:
            data = await self._load()
            return list(data)

    async def multi_get(self, keys: list[str]) -> list[tuple[str, str | None]]:
        async with self._lock:
            data = await self._load()
            return [(key, data.get(key)) for key in keys]

    async def multi_remove(self, keys: list[str]) -> None:
        async with self._lock:
            data = await self._load()
            removed = [data.pop(key) for key in keys if key in data]
            if removed:
                await self._save()


# =============================================================================
# Factory
# =============================================================================


def create_durable_store(path: str | None = None) -> DurableStore | None:
    """
    Create a durable store from a configured path.

    An empty path means no durable tier; the cache runs memory-only.
    ``":memory:"`` selects the in-process dict store.
    """
    if not path:
        return None
    if path == ":memory:":
        return InMemoryDurableStore()
    return JsonFileDurableStore(path)
