"""
Durable storage for the translation cache.

- DurableStore → async key-value capability interface
- InMemoryDurableStore → dict-backed (tests, development)
- JsonFileDurableStore → one JSON file on local disk
"""

from lexicache.storage.base import DurableStore
from lexicache.storage.local import (
    InMemoryDurableStore,
    JsonFileDurableStore,
    create_durable_store,
)

__all__ = [
    "DurableStore",
    "InMemoryDurableStore",
    "JsonFileDurableStore",
    "create_durable_store",
]
