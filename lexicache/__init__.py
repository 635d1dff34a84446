"""
lexicache - a caching, batching client for a remote translation service.
"""

from lexicache.cache import BoundedTTLCache, HybridPersistentCache
from lexicache.config import Settings, get_settings
from lexicache.core.models import TranslationOptions
from lexicache.i18n import (
    TranslationClient,
    LocaleDetector,
    SystemLocaleDetector,
    generate_cache_key,
)
from lexicache.storage import DurableStore, InMemoryDurableStore, JsonFileDurableStore

__version__ = "0.1.0"

__all__ = [
    "TranslationClient",
    "TranslationOptions",
    "BoundedTTLCache",
    "HybridPersistentCache",
    "DurableStore",
    "InMemoryDurableStore",
    "JsonFileDurableStore",
    "LocaleDetector",
    "SystemLocaleDetector",
    "generate_cache_key",
    "Settings",
    "get_settings",
]
