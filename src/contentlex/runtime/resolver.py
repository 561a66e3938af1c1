"""Fallback chain resolution for content keys.

Architecture:
    Each tier is an explicit attempt that returns a value or None. The
    chain is a plain sequence: the first tier that produces a value wins.
    Exceptions are not used for the common "key missing" branch.

String chain (resolve_string):
    1. primary-locale  - requested locale's document
    2. base-language   - base locale's document (skipped when the
                         requested language is the base language)
    3. custom-fallback - caller-supplied text
    4. formatted-key   - key rendered as display text (guaranteed floor)

List chain (resolve_list):
    1. primary-locale
    2. base-language
    3. none            - empty tuple

An empty string, or a list with no non-empty items, counts as absent.

Python 3.13+.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from contentlex.constants import KEY_SEPARATORS
from contentlex.enums import ErrorKind, FallbackTier

if TYPE_CHECKING:
    from collections.abc import Callable

    from contentlex.domains import ContentDomain
    from contentlex.localization.loading import ContentDocument
    from contentlex.localization.types import ContentKey, ContentValue, LocaleCode
    from contentlex.locale_utils import LocaleId
    from contentlex.runtime.cache import DocumentCache
    from contentlex.runtime.statistics import StatisticsMonitor

__all__ = ["FallbackResolver", "ResolutionOutcome", "format_key_as_display_text"]

logger = logging.getLogger(__name__)

_SEPARATOR_PATTERN = re.compile(f"[{re.escape(KEY_SEPARATORS)}\\s]")


def format_key_as_display_text(key: str) -> str:
    """Render a content key as human-readable text.

    Separators become spaces and every word is capitalized, with the rest
    of the word lower-cased. Runs of separators are preserved as runs of
    spaces.

    Example:
        >>> format_key_as_display_text("user_profile_settings")
        'User Profile Settings'
        >>> format_key_as_display_text("test")
        'Test'
        >>> format_key_as_display_text("")
        ''
    """
    words = _SEPARATOR_PATTERN.sub(" ", key).split(" ")
    return " ".join(word[:1].upper() + word[1:].lower() for word in words)


@dataclass(frozen=True, slots=True)
class ResolutionOutcome:
    """Result of one walk of the fallback chain.

    Attributes:
        value: Final string, or tuple of strings for list resolution
        tier: Tier that produced the value
        key: Content key that was resolved
        domain: Domain name
        requested_locale: Locale the caller resolved to
        source_locale: Locale whose document supplied the value
            (None for custom-fallback, formatted-key and none tiers)
    """

    value: ContentValue
    tier: FallbackTier
    key: ContentKey
    domain: str
    requested_locale: LocaleCode
    source_locale: LocaleCode | None = None

    @property
    def is_primary(self) -> bool:
        """True when the requested locale supplied the value."""
        return self.tier is FallbackTier.PRIMARY_LOCALE

    @property
    def is_fallback(self) -> bool:
        """True for every tier other than primary-locale."""
        return self.tier is not FallbackTier.PRIMARY_LOCALE


class FallbackResolver:
    """Walks the precedence chain over cached documents.

    Example:
        >>> resolver = FallbackResolver(cache, monitor, LocaleId("en"))
        >>> outcome = resolver.resolve_string(CARD_NAME, "the_fool", LocaleId("es"))
        >>> outcome.value, outcome.tier
        ('El Loco', <FallbackTier.PRIMARY_LOCALE: 'primary-locale'>)
    """

    __slots__ = ("_base_locale", "_cache", "_statistics")

    def __init__(
        self,
        cache: DocumentCache,
        statistics: StatisticsMonitor,
        base_locale: LocaleId,
    ) -> None:
        """Initialize resolver.

        Args:
            cache: Document cache supplying documents
            statistics: Shared monitor receiving fallback and error events
            base_locale: Locale whose documents back every other locale
        """
        self._cache = cache
        self._statistics = statistics
        self._base_locale = base_locale

    @property
    def base_locale(self) -> LocaleId:
        """Configured base locale."""
        return self._base_locale

    def _needs_base_tier(self, locale: LocaleId) -> bool:
        # documents are keyed by full code, so en-GB still needs en-US
        return locale != self._base_locale

    def _walk_documents[T](
        self,
        domain: ContentDomain,
        locale: LocaleId,
        attempt: Callable[[ContentDocument], T | None],
    ) -> tuple[T, FallbackTier, str] | None:
        """Try the primary then the base document; None if neither has a value."""
        primary = str(locale)
        value = attempt(self._cache.get(domain, primary))
        if value is not None:
            return value, FallbackTier.PRIMARY_LOCALE, primary

        if self._needs_base_tier(locale):
            base = str(self._base_locale)
            value = attempt(self._cache.get(domain, base))
            if value is not None:
                return value, FallbackTier.BASE_LANGUAGE, base
        return None

    def resolve_string(
        self,
        domain: ContentDomain,
        key: ContentKey,
        locale: LocaleId,
        custom_fallback: str | None = None,
    ) -> ResolutionOutcome:
        """Resolve a string key. Total: always returns an outcome.

        Args:
            domain: String-shaped content domain
            key: Content key
            locale: Resolved (supported) locale
            custom_fallback: Text to use before the formatted-key floor

        Returns:
            ResolutionOutcome with a str value
        """
        requested = str(locale)
        found = self._walk_documents(domain, locale, lambda doc: doc.get_string(key))
        if found is not None:
            value, tier, source = found
            if tier is not FallbackTier.PRIMARY_LOCALE:
                self._statistics.record_fallback_used(tier, key, requested)
            return ResolutionOutcome(value, tier, key, domain.name, requested, source)

        self._statistics.record_error(ErrorKind.KEY_MISSING, key=key, locale=requested)

        if custom_fallback:
            tier = FallbackTier.CUSTOM_FALLBACK
            value = custom_fallback
        else:
            tier = FallbackTier.FORMATTED_KEY
            value = format_key_as_display_text(key)
        self._statistics.record_fallback_used(tier, key, requested)
        return ResolutionOutcome(value, tier, key, domain.name, requested)

    def resolve_list(
        self,
        domain: ContentDomain,
        key: ContentKey,
        locale: LocaleId,
        *,
        record_missing: bool = True,
    ) -> ResolutionOutcome:
        """Resolve a list key. Total: empty tuple tagged NONE on failure.

        Args:
            domain: List-shaped content domain
            key: Content key
            locale: Resolved (supported) locale
            record_missing: Record KEY_MISSING when nothing is found. Callers
                with their own next layer pass False.

        Returns:
            ResolutionOutcome with a tuple[str, ...] value
        """
        requested = str(locale)
        found = self._walk_documents(domain, locale, lambda doc: doc.get_list(key) or None)
        if found is not None:
            value, tier, source = found
            if tier is not FallbackTier.PRIMARY_LOCALE:
                self._statistics.record_fallback_used(tier, key, requested)
            return ResolutionOutcome(value, tier, key, domain.name, requested, source)

        if record_missing:
            self._statistics.record_error(ErrorKind.KEY_MISSING, key=key, locale=requested)
        return ResolutionOutcome((), FallbackTier.NONE, key, domain.name, requested)

    def resolve_list_item(
        self,
        domain: ContentDomain,
        key: ContentKey,
        index: int,
        locale: LocaleId,
        custom_fallback: str | None = None,
    ) -> ResolutionOutcome:
        """Resolve one item of a list key by position.

        The item must exist and be non-empty at the same index; otherwise the
        next tier is tried, ending at the custom fallback or formatted key.
        """

        def item_at(document: ContentDocument) -> str | None:
            value = document.entries.get(key)
            if isinstance(value, tuple) and 0 <= index < len(value) and value[index]:
                return value[index]
            return None

        requested = str(locale)
        found = self._walk_documents(domain, locale, item_at)
        if found is not None:
            value, tier, source = found
            if tier is not FallbackTier.PRIMARY_LOCALE:
                self._statistics.record_fallback_used(tier, key, requested)
            return ResolutionOutcome(value, tier, key, domain.name, requested, source)

        self._statistics.record_error(ErrorKind.KEY_MISSING, key=key, locale=requested)
        if custom_fallback:
            tier = FallbackTier.CUSTOM_FALLBACK
            text = custom_fallback
        else:
            tier = FallbackTier.FORMATTED_KEY
            text = format_key_as_display_text(key)
        self._statistics.record_fallback_used(tier, key, requested)
        return ResolutionOutcome(text, tier, key, domain.name, requested)

    def missing_keys(
        self,
        domain: ContentDomain,
        keys: tuple[ContentKey, ...] | list[ContentKey],
        locale: LocaleId,
    ) -> tuple[ContentKey, ...]:
        """Keys with no non-empty value in locale's own document.

        Does not walk the fallback chain and records nothing per key; a
        single KEY_MISSING error summarizes the gaps when any exist.
        """
        document = self._cache.get(domain, str(locale))
        if domain.is_list:
            missing = tuple(key for key in keys if not document.get_list(key))
        else:
            missing = tuple(key for key in keys if document.get_string(key) is None)
        if missing:
            self._statistics.record_error(
                ErrorKind.KEY_MISSING,
                key=f"{domain.name}:validation",
                locale=str(locale),
                error=f"missing keys: {', '.join(missing)}",
            )
        return missing
