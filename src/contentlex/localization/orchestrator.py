"""Multi-locale content resolution facade.

ContentLocalization is the only entry point callers need. It owns one
instance of each engine component and wires them together:

    LocaleResolver      caller locale -> supported LocaleId
    DocumentCache       (domain, locale) -> ContentDocument, singleflight loads
    FallbackResolver    primary -> base-language -> custom -> formatted key
    TemplateComposer    persona/topic interpretation text
    StatisticsMonitor   shared error and fallback counters

Key architectural decisions:
- Protocol-based DocumentSource (dependency inversion)
- Immutable locale configuration (established at construction)
- Lazy document loading; preload() is an optional warm-up
- No lookup raises for data problems: missing documents, missing keys and
  unsupported locales degrade to the next tier and are counted

Python 3.13+.
"""

from __future__ import annotations

import logging
import random
from datetime import date, datetime
from typing import TYPE_CHECKING

from contentlex.config import EngineConfig
from contentlex.domains import ContentDomain, get_domain
from contentlex.enums import ErrorKind, FallbackTier, LocaleMatchKind, Persona
from contentlex.locale_utils import LocaleId, LocaleMatch, LocaleResolver, get_system_locale
from contentlex.runtime.cache import DocumentCache
from contentlex.runtime.resolver import (
    FallbackResolver,
    ResolutionOutcome,
    format_key_as_display_text,
)
from contentlex.runtime.rotation import select_index
from contentlex.runtime.statistics import ErrorStatistics, FallbackEvent, StatisticsMonitor
from contentlex.runtime.templates import InterpretationTemplate, TemplateComposer

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping, Sequence

    from contentlex.localization.loading import DocumentSource, LoadSummary
    from contentlex.localization.types import ContentKey

__all__ = ["ContentLocalization"]

logger = logging.getLogger(__name__)

type LocaleArg = LocaleId | str | None
type DomainArg = ContentDomain | str


class ContentLocalization:
    """Localized content lookups with fallback chains.

    Orchestrates the document cache, fallback resolver, rotation selector
    and template composer over a single DocumentSource.

    Thread Safety:
        All methods may be called concurrently. Document loads are
        coalesced per (domain, locale); statistics updates are atomic.

    Example:
        >>> source = PathDocumentSource("content/{locale}")
        >>> l10n = ContentLocalization(source, EngineConfig.from_codes(["en", "es"]))
        >>> l10n.resolve_string("card-name", "the_fool", "es-MX")
        'El Loco'
        >>> l10n.resolve_string("card-name", "unknown_card", "es")
        'Unknown Card'
    """

    __slots__ = (
        "_cache",
        "_composer",
        "_config",
        "_locales",
        "_resolver",
        "_rng",
        "_source",
        "_statistics",
    )

    def __init__(
        self,
        source: DocumentSource,
        config: EngineConfig | None = None,
        *,
        rng: random.Random | None = None,
        on_fallback: Callable[[FallbackEvent], None] | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            source: Where documents come from
            config: Engine configuration (default: EngineConfig())
            rng: Pseudo-random source for template variants and
                random_string() (default: a fresh random.Random())
            on_fallback: Optional callback invoked for every non-primary
                resolution

        Raises:
            ValueError: If the configuration is invalid
        """
        self._config = config if config is not None else EngineConfig()
        self._source = source
        self._locales = LocaleResolver(
            self._config.supported_locales, self._config.default
        )
        self._statistics = StatisticsMonitor(on_fallback=on_fallback)
        self._cache = DocumentCache(source, self._statistics)
        self._resolver = FallbackResolver(self._cache, self._statistics, self._config.base)
        self._rng = rng if rng is not None else random.Random()
        self._composer = TemplateComposer(self._resolver, self._statistics, self._rng)

    def __repr__(self) -> str:
        locales = ", ".join(str(locale) for locale in self._locales.supported)
        return (
            f"ContentLocalization(locales=[{locales}], "
            f"default={self._locales.default}, base={self._config.base})"
        )

    @property
    def config(self) -> EngineConfig:
        """Engine configuration."""
        return self._config

    @property
    def locales(self) -> tuple[LocaleId, ...]:
        """Supported locales in preference order."""
        return self._locales.supported

    @property
    def default_locale(self) -> LocaleId:
        """Configured default locale."""
        return self._locales.default

    # ------------------------------------------------------------------
    # Locale handling
    # ------------------------------------------------------------------

    def resolve_locale(self, locale: LocaleArg) -> LocaleMatch:
        """Match a caller locale against the supported set.

        Never raises. An unparseable code or a language with no supported
        counterpart records UNSUPPORTED_LOCALE_REQUESTED and matches the
        default locale. None or a blank string means "no preference" and
        matches the default without recording anything.

        Args:
            locale: LocaleId, locale code ('es-MX', 'es_MX') or None

        Returns:
            LocaleMatch whose locale is always a supported LocaleId
        """
        if locale is None or (isinstance(locale, str) and not locale.strip()):
            return LocaleMatch(self._locales.default, LocaleMatchKind.NO_PREFERENCE)

        try:
            requested = LocaleId.coerce(locale)
        except ValueError as e:
            self._statistics.record_error(
                ErrorKind.UNSUPPORTED_LOCALE_REQUESTED, locale=str(locale), error=e
            )
            return LocaleMatch(self._locales.default, LocaleMatchKind.DEFAULT)

        match = self._locales.resolve(requested)
        if match.kind is LocaleMatchKind.DEFAULT:
            self._statistics.record_error(
                ErrorKind.UNSUPPORTED_LOCALE_REQUESTED,
                locale=str(requested),
                error=f"using default locale {match.locale}",
            )
        return match

    def _locale(self, locale: LocaleArg) -> LocaleId:
        match = self.resolve_locale(locale)
        # resolve_locale() always yields a supported locale
        return match.locale or self._locales.default

    def system_locale(self) -> LocaleId:
        """Supported locale closest to the operating system locale.

        The system locale is matched like any caller locale, so an
        unsupported system language yields the default locale.
        """
        return self._locale(get_system_locale())

    def locale_display_name(self, locale: LocaleArg, in_locale: LocaleArg = None) -> str:
        """Display name of a supported locale ('español (España)').

        Args:
            locale: Locale to name (resolved against the supported set)
            in_locale: Locale to render the name in (default: the locale itself)
        """
        target = self._locale(locale)
        display_in = self._locale(in_locale) if in_locale is not None else None
        return target.display_name(display_in)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(
        self,
        domain: DomainArg,
        key: ContentKey,
        locale: LocaleArg = None,
        fallback: str | None = None,
    ) -> ResolutionOutcome:
        """Resolve a key and report which tier produced the value.

        String domains walk the full chain and always produce a string.
        List domains produce a (possibly empty) tuple; fallback is ignored.

        Raises:
            ValueError: If domain is an unknown domain name
        """
        content_domain = get_domain(domain)
        resolved = self._locale(locale)
        if content_domain.is_list:
            return self._resolver.resolve_list(content_domain, key, resolved)
        return self._resolver.resolve_string(content_domain, key, resolved, fallback)

    def resolve_string(
        self,
        domain: DomainArg,
        key: ContentKey,
        locale: LocaleArg = None,
        fallback: str | None = None,
    ) -> str:
        """Resolve a string key to display text.

        Never returns None or an empty string for a non-empty key: when no
        document has the key, fallback is returned, else the key rendered as
        display text ('the_fool' -> 'The Fool').

        Args:
            domain: String-shaped domain (or its name)
            key: Content key
            locale: Requested locale (None: default locale)
            fallback: Text to use before the formatted-key floor

        Raises:
            ValueError: If domain is unknown or list-shaped
        """
        content_domain = self._string_domain(domain)
        outcome = self._resolver.resolve_string(
            content_domain, key, self._locale(locale), fallback
        )
        return outcome.value  # type: ignore[return-value]

    def resolve_list(
        self,
        domain: DomainArg,
        key: ContentKey,
        locale: LocaleArg = None,
    ) -> list[str]:
        """Resolve a list key. Returns an empty list when nothing is found.

        Raises:
            ValueError: If domain is unknown or string-shaped
        """
        content_domain = self._list_domain(domain)
        outcome = self._resolver.resolve_list(content_domain, key, self._locale(locale))
        return list(outcome.value)

    def resolve_list_item(
        self,
        domain: DomainArg,
        key: ContentKey,
        index: int,
        locale: LocaleArg = None,
        fallback: str | None = None,
    ) -> str:
        """Item at index of a list key, walking the chain per item.

        Out-of-range indexes and empty items fall through to the base locale,
        then to fallback, then to the formatted key.

        Raises:
            ValueError: If domain is unknown or string-shaped
        """
        content_domain = self._list_domain(domain)
        outcome = self._resolver.resolve_list_item(
            content_domain, key, index, self._locale(locale), fallback
        )
        return outcome.value  # type: ignore[return-value]

    def list_count(self, domain: DomainArg, key: ContentKey, locale: LocaleArg = None) -> int:
        """Number of items a list key resolves to (0 when nothing is found)."""
        return len(self.resolve_list(domain, key, locale))

    def daily_rotating_string(
        self,
        domain: DomainArg,
        key: ContentKey,
        day: date | datetime | int | None = None,
        locale: LocaleArg = None,
        fallback: str | None = None,
    ) -> str:
        """Content of the day from a list key.

        The item is chosen with select_index(day, len(items)), so every
        locale whose list has the same length shows the same position on the
        same day. When no list is available the result is fallback, else the
        formatted key.

        Args:
            domain: List-shaped domain (or its name)
            key: Content key of the list
            day: Day to select for (default: today)
            locale: Requested locale (None: default locale)
            fallback: Text used when no list is available

        Raises:
            ValueError: If domain is unknown or string-shaped
            TypeError: If day is not a date, datetime or int
        """
        content_domain = self._list_domain(domain)
        resolved = self._locale(locale)
        if day is None:
            day = date.today()

        outcome = self._resolver.resolve_list(content_domain, key, resolved)
        items = outcome.value
        if items:
            return items[select_index(day, len(items))]  # type: ignore[return-value]
        return self._floor(key, resolved, fallback)

    def random_string(
        self,
        domain: DomainArg,
        key: ContentKey,
        locale: LocaleArg = None,
        fallback: str | None = None,
    ) -> str:
        """Random item of a list key, using the engine's random source.

        Raises:
            ValueError: If domain is unknown or string-shaped
        """
        content_domain = self._list_domain(domain)
        resolved = self._locale(locale)
        outcome = self._resolver.resolve_list(content_domain, key, resolved)
        if outcome.value:
            return self._rng.choice(outcome.value)  # type: ignore[arg-type]
        return self._floor(key, resolved, fallback)

    def _floor(self, key: ContentKey, locale: LocaleId, fallback: str | None) -> str:
        """Custom-fallback or formatted-key tier for list-backed lookups."""
        # the list walk already recorded KEY_MISSING
        if fallback:
            tier, value = FallbackTier.CUSTOM_FALLBACK, fallback
        else:
            tier, value = FallbackTier.FORMATTED_KEY, format_key_as_display_text(key)
        self._statistics.record_fallback_used(tier, key, str(locale))
        return value

    # ------------------------------------------------------------------
    # Interpretations
    # ------------------------------------------------------------------

    def compose_interpretation(
        self,
        persona: Persona | str,
        topic: str,
        locale: LocaleArg,
        subject_name: str,
        orientation: str,
        *,
        keywords: Sequence[str] | None = None,
        meaning: str | None = None,
        parameters: Mapping[str, object] | None = None,
    ) -> str:
        """Compose a persona-voiced interpretation.

        Template variants are looked up for (persona, topic), then the
        persona's default topic, then built-in phrases, each through the
        locale fallback chain. One variant per slot is picked with the
        engine's random source.

        Args:
            persona: Guide persona ('sage', 'healer', ...)
            topic: Reading topic ('love', 'work', ...)
            locale: Requested locale (None: default locale)
            subject_name: Value for {name}, usually the card name
            orientation: Value for {orientation}
            keywords: Keywords joined into {keywords} with the locale's
                list pattern
            meaning: Sentence placed between the context and advice phrases
            parameters: Extra placeholder values

        Returns:
            Opening, body and closing paragraphs separated by blank lines
        """
        return self._composer.compose(
            persona,
            topic,
            self._locale(locale),
            subject_name,
            orientation,
            keywords=keywords,
            meaning=meaning,
            parameters=parameters,
        )

    def interpretation_template(
        self, persona: Persona | str, topic: str, locale: LocaleArg = None
    ) -> InterpretationTemplate:
        """Candidate phrases for every slot of (persona, topic, locale)."""
        return self._composer.load_template(persona, topic, self._locale(locale))

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def missing_keys(
        self,
        domain: DomainArg,
        keys: Iterable[ContentKey],
        locale: LocaleArg = None,
    ) -> tuple[ContentKey, ...]:
        """Keys absent from the locale's own document (no fallback walk)."""
        return self._resolver.missing_keys(get_domain(domain), list(keys), self._locale(locale))

    def validate_templates(
        self,
        personas: Iterable[Persona | str] = tuple(Persona),
        locale: LocaleArg = None,
    ) -> dict[str, tuple[str, ...]]:
        """Persona default template keys missing from the locale's document.

        Returns:
            Persona -> missing keys; complete personas are omitted
        """
        return self._composer.validate_templates(personas, self._locale(locale))

    # ------------------------------------------------------------------
    # Cache
    # ------------------------------------------------------------------

    def preload(self, domains: Iterable[DomainArg] | None = None) -> LoadSummary:
        """Load documents for every supported locale ahead of first use.

        Best-effort: failures are recorded and reported in the returned
        summary, never raised.

        Args:
            domains: Domains to load (default: config.preload_domains)

        Raises:
            ValueError: If a domain name is unknown
        """
        targets = (
            self._config.preload_domains
            if domains is None
            else tuple(get_domain(domain) for domain in domains)
        )
        locale_codes = [str(locale) for locale in self._locales.supported]
        return self._cache.preload(targets, locale_codes)

    def clear_cache(self) -> None:
        """Drop every cached document; the next lookup reloads it."""
        self._cache.clear()
        logger.info("Content cache cleared")

    def get_cache_stats(self) -> dict[str, int | float]:
        """Document cache metrics (see DocumentCache.get_stats)."""
        return self._cache.get_stats()

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def get_error_statistics(self) -> ErrorStatistics:
        """Snapshot of error and fallback counters."""
        return self._statistics.get_statistics()

    def reset_statistics(self) -> None:
        """Zero the error and fallback counters."""
        self._statistics.reset()

    def is_error_rate_high(self, threshold: float | None = None) -> bool:
        """Compare the error rate with threshold (default: config value)."""
        if threshold is None:
            threshold = self._config.error_rate_threshold
        return self._statistics.is_error_rate_high(threshold)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _string_domain(domain: DomainArg) -> ContentDomain:
        content_domain = get_domain(domain)
        if content_domain.is_list:
            msg = f"Domain '{content_domain}' holds lists; use resolve_list()"
            raise ValueError(msg)
        return content_domain

    @staticmethod
    def _list_domain(domain: DomainArg) -> ContentDomain:
        content_domain = get_domain(domain)
        if not content_domain.is_list:
            msg = f"Domain '{content_domain}' holds strings; use resolve_string()"
            raise ValueError(msg)
        return content_domain
