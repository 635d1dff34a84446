"""
Locale detection.

The translation client only falls back to a detector when neither the call
nor the client configuration names a target language.
"""

from __future__ import annotations

import locale
import logging
import os
from abc import ABC, abstractmethod

from lexicache.i18n.languages import DEFAULT_LOCALE, is_rtl, normalize_locale

logger = logging.getLogger(__name__)


class LocaleDetector(ABC):
    """Source of the user's preferred locale."""

    @abstractmethod
    def detect_locale(self) -> str:
        """Return the most preferred locale tag."""
        pass


class StaticLocaleDetector(LocaleDetector):
    """Always reports the same locale."""

    def __init__(self, locale_tag: str = DEFAULT_LOCALE):
        self.locale_tag = locale_tag

    def detect_locale(self) -> str:
        return self.locale_tag


class SystemLocaleDetector(LocaleDetector):
    """
    Detect the locale from the process environment.

    Looks at LC_ALL, LC_MESSAGES and LANG in that order (the POSIX
    precedence), then the GNU LANGUAGE priority list, then the C library's
    current locale. Falls back to en-US.
    """

    ENV_VARS = ("LC_ALL", "LC_MESSAGES", "LANG")

    def __init__(self, environ: dict[str, str] | None = None):
        self._environ = environ if environ is not None else os.environ

    def detect_locale(self) -> str:
        preferred = self.preferred_locales()
        return preferred[0] if preferred else DEFAULT_LOCALE

    def preferred_locales(self) -> list[str]:
        """All preferred locales in priority order, without duplicates."""
        candidates: list[str] = []

        for var in self.ENV_VARS:
            value = self._environ.get(var, "")
            if value:
                candidates.append(value)
                break

        # LANGUAGE is a colon-separated priority list: "fr_CA:fr:en"
        candidates.extend(self._environ.get("LANGUAGE", "").split(":"))

        try:
            system_locale, _ = locale.getlocale()
        except ValueError as e:
            logger.debug(f"Cannot read system locale: {e}")
            system_locale = None
        if system_locale:
            candidates.append(system_locale)

        result: list[str] = []
        for candidate in candidates:
            tag = normalize_locale(candidate)
            if tag and tag not in result:
                result.append(tag)
        return result or [DEFAULT_LOCALE]

    def is_rtl(self) -> bool:
        """Whether the detected locale is written right-to-left."""
        return is_rtl(self.detect_locale())
