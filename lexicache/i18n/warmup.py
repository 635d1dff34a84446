"""
Cache warming for translations.

Pre-translates known strings (UI labels, canned messages) to priority
locales so users never hit a cold cache, and preloads the durable tier
into memory at start-up.

Run on:
- Application startup (optional, async)
- Deploy (recommended)

Usage:
    # In the application
    await warm_translation_cache(client, ["Save", "Cancel"], ["es-ES", "fr-FR"])

    # CLI
    python -m lexicache.i18n.warmup --strings config/ui.yaml -l es-ES fr-FR
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

import yaml

from lexicache.cache.hybrid import HybridPersistentCache
from lexicache.config import get_settings
from lexicache.core.models import TranslationOptions
from lexicache.i18n.languages import WARM_UP_LOCALES, get_language_name
from lexicache.i18n.translator import TranslationClient
from lexicache.logging_config import configure_logging

logger = logging.getLogger(__name__)


# =============================================================================
# Content Loaders
# =============================================================================


def load_strings(path: str | Path) -> list[str]:
    """
    Load strings to warm from a YAML file.

    Accepts either a plain list or a mapping with a ``strings`` list.
    Blank entries and duplicates are dropped; order is preserved.
    """
    path = Path(path)
    if not path.exists():
        logger.warning(f"Strings file not found: {path}")
        return []

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if isinstance(data, dict):
        data = data.get("strings", [])
    if not isinstance(data, list):
        logger.warning(f"Unsupported strings file layout in {path}")
        return []

    strings: list[str] = []
    for entry in data:
        if isinstance(entry, str) and entry.strip() and entry not in strings:
            strings.append(entry)
    return strings


# =============================================================================
# Warm-up
# =============================================================================


async def warm_translation_cache(
    client: TranslationClient,
    texts: list[str],
    languages: list[str] | None = None,
    context: str = "",
    tone: str = "",
) -> dict[str, Any]:
    """
    Translate ``texts`` into each language so later lookups hit the cache.

    Requests for one language are issued concurrently, so a batching client
    coalesces them into as few service calls as possible.

    Returns:
        Stats dict: languages, texts, translations, unchanged
    """
    languages = languages or WARM_UP_LOCALES
    texts = [t for t in dict.fromkeys(texts) if t and t.strip()]

    stats = {
        "languages": len(languages),
        "texts": len(texts),
        "translations": 0,
        "unchanged": 0,
    }

    for language in languages:
        options = TranslationOptions(language=language, context=context, tone=tone)
        results = await asyncio.gather(*(client.translate(t, options) for t in texts))

        translated = sum(1 for original, result in zip(texts, results) if result != original)
        stats["translations"] += translated
        stats["unchanged"] += len(texts) - translated

        logger.info(f"Warmed {get_language_name(language)} ({language}): {translated}/{len(texts)} translated")

    logger.info(
        f"Warm-up complete: {stats['languages']} languages, {stats['texts']} texts, "
        f"{stats['translations']} translated, {stats['unchanged']} unchanged"
    )
    return stats


async def warm_from_settings(
    strings_path: str | None,
    languages: list[str] | None = None,
    context: str = "",
) -> dict[str, Any]:
    """Preload the durable tier, then warm it with strings from a file."""
    settings = get_settings()

    async with TranslationClient.from_settings(settings) as client:
        if isinstance(client.cache, HybridPersistentCache):
            await client.cache.preload(settings.preload_max_items)

        texts = load_strings(strings_path) if strings_path else []
        if not texts:
            logger.warning("No strings to warm")
            return {"languages": 0, "texts": 0, "translations": 0, "unchanged": 0}

        return await warm_translation_cache(client, texts, languages, context=context)


# =============================================================================
# CLI Entry Point
# =============================================================================


def main():
    """Run cache warm-up from command line."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Warm translation cache for priority languages"
    )
    parser.add_argument(
        "--languages", "-l",
        nargs="+",
        help="Locales to warm (default: priority locales)"
    )
    parser.add_argument(
        "--strings", "-s",
        default="config/strings.yaml",
        help="Path to a YAML file listing the strings to translate"
    )
    parser.add_argument(
        "--context", "-c",
        default="",
        help="Context sent with every string"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Verbose logging"
    )

    args = parser.parse_args()
    configure_logging(debug=args.debug or get_settings().debug)

    asyncio.run(warm_from_settings(
        strings_path=args.strings,
        languages=args.languages,
        context=args.context,
    ))


if __name__ == "__main__":
    main()
