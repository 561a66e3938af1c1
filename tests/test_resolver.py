"""Tests for FallbackResolver precedence and the formatted-key floor.

Tests the tier order (primary -> base-language -> custom -> formatted key),
statistics recorded per tier, and totality under failing sources.
"""

from __future__ import annotations

from typing import Any

import pytest
from hypothesis import event, given
from hypothesis import strategies as st

from contentlex.domains import CARD_NAME, GUIDE_TEMPLATE, JOURNAL_PROMPT
from contentlex.enums import FallbackTier
from contentlex.locale_utils import LocaleId
from contentlex.localization import MemoryDocumentSource
from contentlex.runtime.cache import DocumentCache
from contentlex.runtime.resolver import FallbackResolver, format_key_as_display_text
from contentlex.runtime.statistics import StatisticsMonitor
from tests.strategies import content_keys, document_pairs

EN = LocaleId("en")
ES = LocaleId("es")


def _resolver(documents: dict[str, dict[str, Any]]) -> tuple[FallbackResolver, StatisticsMonitor]:
    monitor = StatisticsMonitor()
    cache = DocumentCache(MemoryDocumentSource(documents), monitor)
    return FallbackResolver(cache, monitor, EN), monitor


@pytest.fixture
def resolver_and_monitor(
    sample_documents: dict[str, dict[str, Any]],
) -> tuple[FallbackResolver, StatisticsMonitor]:
    return _resolver(sample_documents)


class TestFormatKeyAsDisplayText:
    """Test the guaranteed floor rendering."""

    @pytest.mark.parametrize(
        ("key", "expected"),
        [
            ("user_profile_settings", "User Profile Settings"),
            ("test", "Test"),
            ("", ""),
            ("ace-of-cups", "Ace Of Cups"),
            ("THE_FOOL", "The Fool"),
            ("mixed_sep-key", "Mixed Sep Key"),
        ],
    )
    def test_examples(self, key: str, expected: str) -> None:
        """Separators become spaces, words are capitalized."""
        assert format_key_as_display_text(key) == expected

    @given(key=content_keys())
    def test_no_separators_remain(self, key: str) -> None:
        """Property: output has no key separators and keeps its length."""
        result = format_key_as_display_text(key)
        assert "_" not in result
        assert "-" not in result
        assert len(result) == len(key)
        assert result == format_key_as_display_text(key)


class TestResolveString:
    """Test string chain precedence."""

    def test_primary_locale(
        self, resolver_and_monitor: tuple[FallbackResolver, StatisticsMonitor]
    ) -> None:
        """Requested locale's value wins and records nothing."""
        resolver, monitor = resolver_and_monitor
        outcome = resolver.resolve_string(CARD_NAME, "the_fool", ES)

        assert outcome.value == "El Loco"
        assert outcome.tier is FallbackTier.PRIMARY_LOCALE
        assert outcome.source_locale == "es"
        assert outcome.is_primary
        stats = monitor.get_statistics()
        assert stats.total_errors == 0
        assert stats.fallbacks_used == 0

    def test_base_language(self) -> None:
        """Missing translation falls back to the base language."""
        resolver, monitor = _resolver({"en": {"card-name": {"greeting": "Hello"}}, "es": {}})
        outcome = resolver.resolve_string(CARD_NAME, "greeting", ES)

        assert outcome.value == "Hello"
        assert outcome.tier is FallbackTier.BASE_LANGUAGE
        assert outcome.source_locale == "en"
        assert outcome.requested_locale == "es"
        stats = monitor.get_statistics()
        assert stats.fallbacks_by_tier == {"base-language": 1}
        # es document missing is a load error, the key itself is not
        assert stats.errors_by_kind == {"document-not-found": 1}

    def test_base_language_key_missing_in_translation(
        self, resolver_and_monitor: tuple[FallbackResolver, StatisticsMonitor]
    ) -> None:
        """Key absent from a loaded translation uses the base value."""
        resolver, monitor = resolver_and_monitor
        outcome = resolver.resolve_string(CARD_NAME, "the_magician", ES)

        assert outcome.value == "The Magician"
        assert outcome.tier is FallbackTier.BASE_LANGUAGE
        assert monitor.get_statistics().total_errors == 0

    def test_custom_fallback(
        self, resolver_and_monitor: tuple[FallbackResolver, StatisticsMonitor]
    ) -> None:
        """Custom fallback precedes the formatted key."""
        resolver, monitor = resolver_and_monitor
        outcome = resolver.resolve_string(CARD_NAME, "the_moon", ES, "Mystery Card")

        assert outcome.value == "Mystery Card"
        assert outcome.tier is FallbackTier.CUSTOM_FALLBACK
        assert outcome.source_locale is None
        stats = monitor.get_statistics()
        assert stats.errors_by_kind == {"key-missing": 1}
        assert stats.fallbacks_by_tier == {"custom-fallback": 1}

    def test_formatted_key(
        self, resolver_and_monitor: tuple[FallbackResolver, StatisticsMonitor]
    ) -> None:
        """Formatted key is the final tier."""
        resolver, monitor = resolver_and_monitor
        outcome = resolver.resolve_string(CARD_NAME, "the_high_priestess", ES)

        assert outcome.value == "The High Priestess"
        assert outcome.tier is FallbackTier.FORMATTED_KEY
        assert monitor.get_statistics().errors_by_key == {"the_high_priestess": 1}

    def test_empty_custom_fallback_ignored(
        self, resolver_and_monitor: tuple[FallbackResolver, StatisticsMonitor]
    ) -> None:
        """An empty custom fallback does not count as a value."""
        resolver, _ = resolver_and_monitor
        outcome = resolver.resolve_string(CARD_NAME, "the_moon", ES, "")
        assert outcome.tier is FallbackTier.FORMATTED_KEY

    def test_base_tier_skipped_for_base_language(
        self, memory_source: MemoryDocumentSource
    ) -> None:
        """Base-language requests do not look up the base document twice."""
        monitor = StatisticsMonitor()
        resolver = FallbackResolver(DocumentCache(memory_source, monitor), monitor, EN)
        outcome = resolver.resolve_string(CARD_NAME, "the_moon", EN)

        assert outcome.tier is FallbackTier.FORMATTED_KEY
        assert memory_source.load_count("card-name", "en") == 1
        assert memory_source.total_loads == 1

    def test_regional_variant_of_base_language(self) -> None:
        """A same-language regional document still falls back to the base document."""
        monitor = StatisticsMonitor()
        source = MemoryDocumentSource(
            {
                "en-US": {"card-name": {"the_fool": "Fool (US)", "the_star": "The Star"}},
                "en-GB": {"card-name": {"the_star": "The Star (GB)"}},
            }
        )
        resolver = FallbackResolver(DocumentCache(source, monitor), monitor, LocaleId("en", "US"))

        outcome = resolver.resolve_string(CARD_NAME, "the_fool", LocaleId("en", "GB"))
        assert outcome.value == "Fool (US)"
        assert outcome.tier is FallbackTier.BASE_LANGUAGE
        assert outcome.source_locale == "en-US"

        own = resolver.resolve_string(CARD_NAME, "the_star", LocaleId("en", "GB"))
        assert own.value == "The Star (GB)"
        assert own.tier is FallbackTier.PRIMARY_LOCALE
        assert monitor.get_statistics().total_errors == 0

    def test_empty_value_is_absent(self) -> None:
        """Empty strings fall through to the next tier."""
        resolver, _ = _resolver(
            {"en": {"card-name": {"the_fool": "The Fool"}}, "es": {"card-name": {"the_fool": ""}}}
        )
        outcome = resolver.resolve_string(CARD_NAME, "the_fool", ES)
        assert outcome.value == "The Fool"
        assert outcome.tier is FallbackTier.BASE_LANGUAGE

    def test_total_when_every_load_fails(self) -> None:
        """Resolution never fails, even with no documents at all."""
        resolver, monitor = _resolver({})
        outcome = resolver.resolve_string(CARD_NAME, "wheel_of_fortune", ES)

        assert outcome.value == "Wheel Of Fortune"
        stats = monitor.get_statistics()
        assert stats.errors_by_kind == {"document-not-found": 2, "key-missing": 1}

    @given(pair=document_pairs())
    def test_precedence_property(self, pair: tuple[dict[str, str], dict[str, str]]) -> None:
        """Property: translated value if present, else the base value."""
        base, translated = pair
        resolver, _ = _resolver({"en": {"card-name": base}, "es": {"card-name": translated}})
        for key, base_value in base.items():
            outcome = resolver.resolve_string(CARD_NAME, key, ES)
            expected = translated.get(key, base_value)
            event(f"tier={outcome.tier}")
            assert outcome.value == expected

    @given(key=content_keys())
    def test_totality_property(self, key: str) -> None:
        """Property: any non-empty key resolves to non-empty text."""
        resolver, _ = _resolver({})
        outcome = resolver.resolve_string(CARD_NAME, key, ES)
        assert isinstance(outcome.value, str)
        assert outcome.value


class TestResolveList:
    """Test list chain precedence."""

    def test_primary_list(
        self, resolver_and_monitor: tuple[FallbackResolver, StatisticsMonitor]
    ) -> None:
        """Translated list is returned as a tuple."""
        resolver, _ = resolver_and_monitor
        outcome = resolver.resolve_list(JOURNAL_PROMPT, "daily", ES)
        assert isinstance(outcome.value, tuple)
        assert len(outcome.value) == 7
        assert outcome.value[0] == "¿Por qué estás agradecido hoy?"

    def test_base_list(
        self, resolver_and_monitor: tuple[FallbackResolver, StatisticsMonitor]
    ) -> None:
        """Untranslated list falls back to the base language."""
        resolver, monitor = resolver_and_monitor
        outcome = resolver.resolve_list(GUIDE_TEMPLATE, "healer.default.opening", ES)
        assert outcome.value == ("Breathe deeply.",)
        assert outcome.tier is FallbackTier.BASE_LANGUAGE
        assert monitor.get_statistics().fallbacks_used == 1

    def test_missing_list_is_empty(
        self, resolver_and_monitor: tuple[FallbackResolver, StatisticsMonitor]
    ) -> None:
        """Missing lists resolve to an empty tuple tagged NONE."""
        resolver, monitor = resolver_and_monitor
        outcome = resolver.resolve_list(JOURNAL_PROMPT, "weekly", ES)
        assert outcome.value == ()
        assert outcome.tier is FallbackTier.NONE
        assert monitor.get_statistics().errors_by_kind == {"key-missing": 1}

    def test_record_missing_false(
        self, resolver_and_monitor: tuple[FallbackResolver, StatisticsMonitor]
    ) -> None:
        """record_missing=False suppresses the KEY_MISSING error."""
        resolver, monitor = resolver_and_monitor
        resolver.resolve_list(JOURNAL_PROMPT, "weekly", ES, record_missing=False)
        assert monitor.get_statistics().total_errors == 0

    def test_list_of_empty_items_is_absent(self) -> None:
        """A list with only empty items counts as absent."""
        resolver, _ = _resolver(
            {"en": {"journal-prompt": {"daily": ["a"]}}, "es": {"journal-prompt": {"daily": [""]}}}
        )
        outcome = resolver.resolve_list(JOURNAL_PROMPT, "daily", ES)
        assert outcome.value == ("a",)


class TestResolveListItem:
    """Test positional list item resolution."""

    def test_item_in_primary(
        self, resolver_and_monitor: tuple[FallbackResolver, StatisticsMonitor]
    ) -> None:
        """Item at index of the translated list."""
        resolver, _ = resolver_and_monitor
        outcome = resolver.resolve_list_item(JOURNAL_PROMPT, "daily", 3, ES)
        assert outcome.value == "¿Qué estás listo para soltar?"

    def test_short_translation_uses_base_item(self) -> None:
        """Index beyond a shorter translation uses the base item."""
        resolver, _ = _resolver(
            {
                "en": {"journal-prompt": {"daily": ["one", "two", "three"]}},
                "es": {"journal-prompt": {"daily": ["uno"]}},
            }
        )
        outcome = resolver.resolve_list_item(JOURNAL_PROMPT, "daily", 2, ES)
        assert outcome.value == "three"
        assert outcome.tier is FallbackTier.BASE_LANGUAGE

    def test_out_of_range_everywhere(
        self, resolver_and_monitor: tuple[FallbackResolver, StatisticsMonitor]
    ) -> None:
        """Out-of-range index ends at custom fallback or formatted key."""
        resolver, _ = resolver_and_monitor
        assert resolver.resolve_list_item(JOURNAL_PROMPT, "daily", 99, ES).value == "Daily"
        custom = resolver.resolve_list_item(JOURNAL_PROMPT, "daily", -1, ES, "Write freely.")
        assert custom.value == "Write freely."
        assert custom.tier is FallbackTier.CUSTOM_FALLBACK

    @given(index=st.integers(min_value=0, max_value=6))
    def test_in_range_is_primary(self, index: int) -> None:
        """Property: every in-range index of a complete list is primary."""
        resolver, _ = _resolver({"en": {"journal-prompt": {"daily": list("abcdefg")}}})
        outcome = resolver.resolve_list_item(JOURNAL_PROMPT, "daily", index, EN)
        assert outcome.value == "abcdefg"[index]
        assert outcome.is_primary


class TestMissingKeys:
    """Test translation completeness checks."""

    def test_reports_untranslated(
        self, resolver_and_monitor: tuple[FallbackResolver, StatisticsMonitor]
    ) -> None:
        """Keys absent from the locale's own document are reported once."""
        resolver, monitor = resolver_and_monitor
        missing = resolver.missing_keys(
            CARD_NAME, ["the_fool", "the_magician", "the_star"], ES
        )
        assert missing == ("the_magician",)
        stats = monitor.get_statistics()
        assert stats.total_errors == 1
        assert stats.errors_by_key == {"card-name:validation": 1}
        assert stats.fallbacks_used == 0

    def test_complete_records_nothing(
        self, resolver_and_monitor: tuple[FallbackResolver, StatisticsMonitor]
    ) -> None:
        """Complete documents report no gaps."""
        resolver, monitor = resolver_and_monitor
        assert resolver.missing_keys(CARD_NAME, ["the_fool"], EN) == ()
        assert monitor.get_statistics().total_errors == 0

    def test_list_domain(
        self, resolver_and_monitor: tuple[FallbackResolver, StatisticsMonitor]
    ) -> None:
        """List domains check for non-empty lists."""
        resolver, _ = resolver_and_monitor
        missing = resolver.missing_keys(
            GUIDE_TEMPLATE, ["sage.default.opening", "healer.default.opening"], ES
        )
        assert missing == ("healer.default.opening",)
