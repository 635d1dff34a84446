"""
Internationalization - cached, batched access to the translation service.

Design:
1. Every request maps to a deterministic cache key shared with the service
2. Cache first (memory, optionally backed by a durable store)
3. Misses are batched (default) or sent individually with retries
4. Never raises - the original text is the fallback

Usage:
    from lexicache.i18n import TranslationClient

    client = TranslationClient(api_key="...", customer_id="acme")

    # Simple
    text_es = await client.translate("Hello world", {"language": "es-ES"})

    # With context (better translations)
    text_fr = await client.translate(
        "She passed in 2010",
        {"language": "fr-FR", "context": "biography", "tone": "formal"},
    )
"""

from lexicache.i18n.cache_key import generate_cache_key
from lexicache.i18n.translator import (
    TranslationClient,
    QueuedRequest,
    MAX_TEXT_LENGTH,
    LOW_CONFIDENCE_THRESHOLD,
)
from lexicache.i18n.locale_detector import (
    LocaleDetector,
    StaticLocaleDetector,
    SystemLocaleDetector,
)
from lexicache.i18n.languages import (
    DEFAULT_LOCALE,
    WARM_UP_LOCALES,
    RTL_LANGUAGES,
    get_language_name,
    is_rtl,
    normalize_locale,
)

__all__ = [
    # Core translation
    "TranslationClient",
    "QueuedRequest",
    "generate_cache_key",
    "MAX_TEXT_LENGTH",
    "LOW_CONFIDENCE_THRESHOLD",
    # Locale detection
    "LocaleDetector",
    "StaticLocaleDetector",
    "SystemLocaleDetector",
    # Language utilities
    "DEFAULT_LOCALE",
    "WARM_UP_LOCALES",
    "RTL_LANGUAGES",
    "get_language_name",
    "is_rtl",
    "normalize_locale",
]
