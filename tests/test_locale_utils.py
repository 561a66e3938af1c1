"""Tests for locale_utils.py.

Covers normalize_locale, LocaleId parsing, supported-locale matching and
system locale detection. Includes property-based tests with Hypothesis
for locale matching.

Python 3.13+.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest
from hypothesis import event, given
from hypothesis import strategies as st

from contentlex.enums import LocaleMatchKind
from contentlex.locale_utils import (
    LocaleId,
    LocaleResolver,
    get_babel_locale,
    get_system_locale,
    normalize_locale,
    resolve_locale,
)
from tests.strategies import locale_codes

EN_US = LocaleId("en", "US")
ES_ES = LocaleId("es", "ES")


class TestNormalizeLocale:
    """Test normalize_locale function."""

    def test_bcp47_to_posix(self) -> None:
        """BCP-47 hyphens become POSIX underscores."""
        assert normalize_locale("en-US") == "en_US"

    def test_simple_locale(self) -> None:
        """Language-only code unchanged."""
        assert normalize_locale("en") == "en"

    def test_whitespace_stripped(self) -> None:
        """Surrounding whitespace removed."""
        assert normalize_locale("  es-MX ") == "es_MX"


class TestLocaleIdParse:
    """Test LocaleId.parse and string forms."""

    def test_bcp47(self) -> None:
        """BCP-47 code parsed into language and region."""
        assert LocaleId.parse("es-MX") == LocaleId("es", "MX")

    def test_posix(self) -> None:
        """POSIX code parsed into language and region."""
        assert LocaleId.parse("es_MX") == LocaleId("es", "MX")

    def test_case_normalized(self) -> None:
        """Language lower-cased, region upper-cased."""
        assert LocaleId.parse("ES-mx") == LocaleId("es", "MX")

    def test_language_only(self) -> None:
        """Language-only code has no region."""
        assert LocaleId.parse("en") == LocaleId("en")

    def test_encoding_suffix_ignored(self) -> None:
        """Encoding suffix from environment variables is dropped."""
        assert LocaleId.parse("es_ES.UTF-8") == ES_ES

    def test_script_dropped(self) -> None:
        """Script subtag is not part of the identifier."""
        assert LocaleId.parse("zh-Hans-CN") == LocaleId("zh", "CN")

    @pytest.mark.parametrize("code", ["", "   ", "123", "e1"])
    def test_invalid_raises_value_error(self, code: str) -> None:
        """Unparseable codes raise ValueError."""
        with pytest.raises(ValueError):
            LocaleId.parse(code)

    def test_str_is_bcp47(self) -> None:
        """str() renders BCP-47 form."""
        assert str(LocaleId("es", "MX")) == "es-MX"
        assert str(LocaleId("en")) == "en"

    def test_posix_property(self) -> None:
        """posix renders Babel form."""
        assert LocaleId("es", "MX").posix == "es_MX"
        assert LocaleId("en").posix == "en"

    def test_coerce_passes_instances_through(self) -> None:
        """coerce returns LocaleId instances unchanged."""
        assert LocaleId.coerce(EN_US) is EN_US
        assert LocaleId.coerce("en-US") == EN_US

    def test_language_only_drops_region(self) -> None:
        """language_only strips the region."""
        assert ES_ES.language_only == LocaleId("es")
        assert LocaleId("es").language_only == LocaleId("es")

    def test_same_language(self) -> None:
        """same_language ignores the region."""
        assert LocaleId("es", "MX").same_language(ES_ES)
        assert not EN_US.same_language(ES_ES)


class TestDisplayName:
    """Test Babel-backed locale display names."""

    def test_native_name(self) -> None:
        """Name rendered in the locale itself."""
        assert ES_ES.display_name() == "español (España)"

    def test_name_in_other_locale(self) -> None:
        """Name rendered in another locale."""
        assert LocaleId("es").display_name(LocaleId("en")) == "Spanish"

    def test_unknown_locale_returns_code(self) -> None:
        """Locales without CLDR data fall back to the code."""
        assert LocaleId("xx", "YY").display_name() == "xx-YY"

    def test_get_babel_locale(self) -> None:
        """get_babel_locale accepts BCP-47 codes."""
        locale = get_babel_locale("es-MX")
        assert locale.language == "es"
        assert locale.territory == "MX"


class TestResolveLocale:
    """Test supported-locale matching precedence."""

    def test_exact_match(self) -> None:
        """Exact language+region match wins."""
        match = resolve_locale(ES_ES, [EN_US, ES_ES], EN_US)
        assert match.locale == ES_ES
        assert match.kind is LocaleMatchKind.EXACT
        assert not match.is_fallback

    def test_language_match(self) -> None:
        """Same language, different region matches the supported variant."""
        match = resolve_locale(LocaleId("es", "MX"), [EN_US, ES_ES], EN_US)
        assert match.locale == ES_ES
        assert match.kind is LocaleMatchKind.LANGUAGE
        assert match.is_fallback

    def test_first_language_match_in_supported_order(self) -> None:
        """Supported order decides between two regional variants."""
        supported = [LocaleId("es", "MX"), ES_ES]
        match = resolve_locale(LocaleId("es", "AR"), supported, None)
        assert match.locale == LocaleId("es", "MX")

    def test_unsupported_uses_default(self) -> None:
        """Unsupported language matches the configured default."""
        match = resolve_locale(LocaleId("fr", "FR"), [EN_US, ES_ES], EN_US)
        assert match.locale == EN_US
        assert match.kind is LocaleMatchKind.DEFAULT
        assert match.requested == LocaleId("fr", "FR")

    def test_unsupported_without_default_uses_first(self) -> None:
        """Without a supported default the first supported locale is used."""
        match = resolve_locale(LocaleId("fr"), [ES_ES, EN_US], LocaleId("de"))
        assert match.locale == ES_ES

    def test_no_preference(self) -> None:
        """None yields a NO_PREFERENCE match without a locale."""
        match = resolve_locale(None, [EN_US], EN_US)
        assert match.locale is None
        assert match.kind is LocaleMatchKind.NO_PREFERENCE

    def test_empty_supported_raises(self) -> None:
        """Empty supported list is a configuration error."""
        with pytest.raises(ValueError, match="At least one supported locale"):
            resolve_locale(EN_US, [], EN_US)

    @given(code=locale_codes())
    def test_result_always_supported(self, code: str) -> None:
        """Property: any parseable request resolves to a supported locale."""
        supported = [EN_US, ES_ES]
        match = resolve_locale(LocaleId.parse(code), supported, EN_US)
        event(f"match_kind={match.kind}")
        assert match.locale in supported

    @given(code=locale_codes())
    def test_same_language_never_defaults(self, code: str) -> None:
        """Property: a supported language never falls to the default tier."""
        requested = LocaleId.parse(code)
        supported = [EN_US, ES_ES, LocaleId("fr")]
        match = resolve_locale(requested, supported, EN_US)
        if requested.language in ("en", "es", "fr"):
            assert match.kind is not LocaleMatchKind.DEFAULT
            assert match.locale is not None
            assert match.locale.same_language(requested)


class TestLocaleResolver:
    """Test LocaleResolver configuration checks."""

    def test_duplicates_removed(self) -> None:
        """Duplicate supported locales collapse, order preserved."""
        resolver = LocaleResolver([EN_US, ES_ES, EN_US])
        assert resolver.supported == (EN_US, ES_ES)

    def test_default_defaults_to_first(self) -> None:
        """Default is the first supported locale when not given."""
        assert LocaleResolver([ES_ES, EN_US]).default == ES_ES

    def test_unsupported_default_raises(self) -> None:
        """Default outside the supported set is rejected."""
        with pytest.raises(ValueError, match="not in supported locales"):
            LocaleResolver([EN_US], LocaleId("fr"))

    def test_empty_raises(self) -> None:
        """Empty supported list is rejected."""
        with pytest.raises(ValueError, match="At least one supported locale"):
            LocaleResolver([])

    def test_is_supported_by_language(self) -> None:
        """is_supported compares languages only."""
        resolver = LocaleResolver([EN_US, ES_ES])
        assert resolver.is_supported(LocaleId("es", "MX"))
        assert not resolver.is_supported(LocaleId("fr"))


class TestGetSystemLocale:
    """Test get_system_locale detection order."""

    def test_from_getlocale(self) -> None:
        """OS locale is used first."""
        with patch("locale.getlocale", return_value=("es_MX", "UTF-8")):
            assert get_system_locale() == "es_MX"

    def test_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """LANG is used when the OS locale is unavailable."""
        monkeypatch.delenv("LC_ALL", raising=False)
        monkeypatch.delenv("LC_MESSAGES", raising=False)
        monkeypatch.setenv("LANG", "es_ES.UTF-8")
        with patch("locale.getlocale", return_value=(None, None)):
            assert get_system_locale() == "es_ES"

    def test_c_locale_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """C/POSIX pseudo-locales fall through to the default."""
        monkeypatch.setenv("LC_ALL", "C")
        monkeypatch.setenv("LC_MESSAGES", "POSIX")
        monkeypatch.delenv("LANG", raising=False)
        with patch("locale.getlocale", return_value=("C", None)):
            assert get_system_locale() == "en"

    def test_raise_on_failure(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """raise_on_failure=True raises when nothing is detected."""
        for var in ("LC_ALL", "LC_MESSAGES", "LANG"):
            monkeypatch.delenv(var, raising=False)
        with (
            patch("locale.getlocale", return_value=(None, None)),
            pytest.raises(RuntimeError, match="Could not determine system locale"),
        ):
            get_system_locale(raise_on_failure=True)

    @given(st.sampled_from(["en_US", "es_ES", "fr_FR"]))
    def test_detected_locale_parses(self, code: str) -> None:
        """Property: detected codes are parseable by LocaleId."""
        with patch("locale.getlocale", return_value=(code, "UTF-8")):
            assert LocaleId.parse(get_system_locale()).posix == code
