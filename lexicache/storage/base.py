"""
Durable key-value store abstraction.

The hybrid translation cache persists entries through this interface. It
matches the shape of the async key-value capabilities found on client
platforms (string keys, string values, bulk read and delete), so any such
backend can be wrapped and injected at construction.

Implementations:
- InMemoryDurableStore → dict (tests, development)
- JsonFileDurableStore → single JSON document on disk
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class DurableStore(ABC):
    """
    Asynchronous string key-value store.

    Implementations may raise on any operation; callers that need
    best-effort semantics (the hybrid cache) catch and log.
    """

    @abstractmethod
    async def get_item(self, key: str) -> str | None:
        """Get a value, or None if the key is absent."""
        pass

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        """Store a value, replacing any existing one."""
        pass

    @abstractmethod
    async def remove_item(self, key: str) -> None:
        """Delete a key. Deleting an absent key is not an error."""
        pass

    @abstractmethod
    async def get_all_keys(self) -> list[str]:
        """List every key in the store."""
        pass

    @abstractmethod
    async def multi_get(self, keys: list[str]) -> list[tuple[str, str | None]]:
        """Bulk read. Returns (key, value) pairs in the order requested."""
        pass

    @abstractmethod
    async def multi_remove(self, keys: list[str]) -> None:
        """Bulk delete."""
        pass
