"""
Locale tags and language utilities.

Locales are BCP 47 style tags ("en-US", "pt-BR", "zh-TW"). The service
accepts any tag; the tables here only drive logging, RTL checks and the
default warm-up set.
"""

from __future__ import annotations


DEFAULT_LOCALE = "en-US"


# Human-readable names, keyed by primary language subtag
LANGUAGE_NAMES: dict[str, str] = {
    "en": "English",
    "es": "Spanish",
    "zh": "Chinese",
    "pt": "Portuguese",
    "fr": "French",
    "de": "German",
    "ja": "Japanese",
    "ko": "Korean",
    "it": "Italian",
    "ru": "Russian",
    "nl": "Dutch",
    "pl": "Polish",
    "vi": "Vietnamese",
    "th": "Thai",
    "tr": "Turkish",
    "id": "Indonesian",
    "sv": "Swedish",
    "da": "Danish",
    "fi": "Finnish",
    "el": "Greek",
    "cs": "Czech",
    "hu": "Hungarian",
    "ro": "Romanian",
    "uk": "Ukrainian",
    "hi": "Hindi",
    "bn": "Bengali",
    "ar": "Arabic",
    "he": "Hebrew",
    "fa": "Persian",
    "ur": "Urdu",
    "sw": "Swahili",
}


# Right-to-left scripts (need mirrored layouts)
RTL_LANGUAGES = frozenset({"ar", "he", "fa", "ur", "ps", "sd", "yi", "dv", "ug"})


# Default set for cache warming (highest traffic expected)
WARM_UP_LOCALES: list[str] = [
    "es-ES",
    "fr-FR",
    "de-DE",
    "pt-BR",
    "zh-CN",
    "ja-JP",
    "ko-KR",
    "it-IT",
]


# =============================================================================
# Utilities
# =============================================================================


def normalize_locale(tag: str) -> str:
    """
    Normalize a POSIX or BCP 47 locale to a BCP 47 tag.

    "en_US.UTF-8" -> "en-US", "PT-br" -> "pt-BR", "zh_Hant_TW" -> "zh-Hant-TW".
    Returns an empty string for "C"/"POSIX" and blank input.
    """
    tag = tag.strip()
    # Drop encoding and modifier: en_US.UTF-8@euro
    tag = tag.split(".", 1)[0].split("@", 1)[0]
    if not tag or tag.upper() in ("C", "POSIX"):
        return ""

    parts = tag.replace("_", "-").split("-")
    normalized = [parts[0].lower()]
    for part in parts[1:]:
        if len(part) == 2 or (len(part) == 3 and part.isdigit()):
            normalized.append(part.upper())  # region
        elif len(part) == 4:
            normalized.append(part.title())  # script
        else:
            normalized.append(part.lower())
    return "-".join(normalized)


def language_subtag(tag: str) -> str:
    """Primary language of a locale tag: "pt-BR" -> "pt"."""
    return normalize_locale(tag).split("-", 1)[0]


def get_language_name(tag: str) -> str:
    """Get human-readable language name for a locale tag."""
    return LANGUAGE_NAMES.get(language_subtag(tag), tag)


def is_rtl(tag: str) -> bool:
    """Check if locale is written right-to-left."""
    return language_subtag(tag) in RTL_LANGUAGES
