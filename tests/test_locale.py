"""
Tests for locale normalization and detection.
"""

import pytest

from lexicache.i18n.languages import (
    get_language_name,
    is_rtl,
    language_subtag,
    normalize_locale,
)
from lexicache.i18n.locale_detector import StaticLocaleDetector, SystemLocaleDetector


# =============================================================================
# Language Utilities
# =============================================================================


class TestNormalizeLocale:
    @pytest.mark.parametrize("raw,expected", [
        ("en_US.UTF-8", "en-US"),
        ("de_DE@euro", "de-DE"),
        ("PT-br", "pt-BR"),
        ("zh_Hant_TW", "zh-Hant-TW"),
        ("es-419", "es-419"),
        ("fr", "fr"),
        ("C", ""),
        ("POSIX", ""),
        ("  ", ""),
    ])
    def test_normalize(self, raw, expected):
        assert normalize_locale(raw) == expected

    def test_language_subtag(self):
        assert language_subtag("pt_BR") == "pt"

    def test_language_name(self):
        assert get_language_name("es-MX") == "Spanish"
        assert get_language_name("xx-YY") == "xx-YY"

    def test_rtl(self):
        assert is_rtl("ar-EG")
        assert is_rtl("he")
        assert not is_rtl("en-US")


# =============================================================================
# Detectors
# =============================================================================


class TestSystemLocaleDetector:
    def test_lc_all_takes_precedence(self):
        detector = SystemLocaleDetector({"LC_ALL": "fr_CA.UTF-8", "LANG": "en_US.UTF-8"})
        assert detector.detect_locale() == "fr-CA"

    def test_lang(self):
        detector = SystemLocaleDetector({"LANG": "ja_JP.UTF-8"})
        assert detector.detect_locale() == "ja-JP"

    def test_language_priority_list(self):
        detector = SystemLocaleDetector({"LANG": "de_DE.UTF-8", "LANGUAGE": "de_AT:de:en"})
        preferred = detector.preferred_locales()
        assert preferred[:4] == ["de-DE", "de-AT", "de", "en"]

    def test_c_locale_is_skipped(self):
        detector = SystemLocaleDetector({"LC_ALL": "C", "LANGUAGE": "nl_NL"})
        assert detector.detect_locale() == "nl-NL"

    def test_always_returns_a_locale(self):
        assert SystemLocaleDetector({}).detect_locale()

    def test_is_rtl(self):
        assert SystemLocaleDetector({"LANG": "ar_SA.UTF-8"}).is_rtl()
        assert not SystemLocaleDetector({"LANG": "en_GB.UTF-8"}).is_rtl()


class TestStaticLocaleDetector:
    def test_default(self):
        assert StaticLocaleDetector().detect_locale() == "en-US"

    def test_fixed(self):
        assert StaticLocaleDetector("sv-SE").detect_locale() == "sv-SE"
