"""Locale identifiers and supported-locale matching.

Centralizes locale parsing and matching used throughout the codebase.
All caller input is parsed into LocaleId at the system boundary; the
rest of the engine compares LocaleId values and uses str(locale) as the
canonical cache and document key.

Matching precedence (resolve_locale):
    1. Exact language+region match
    2. First language-only match (supported order is significant)
    3. Configured default if supported, else the first supported locale

Python 3.13+.
"""

from __future__ import annotations

import functools
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

from babel.core import UnknownLocaleError, parse_locale

from contentlex.enums import LocaleMatchKind

if TYPE_CHECKING:
    from collections.abc import Iterable

    from babel import Locale

__all__ = [
    "LocaleId",
    "LocaleMatch",
    "LocaleResolver",
    "get_babel_locale",
    "get_system_locale",
    "normalize_locale",
    "resolve_locale",
]


def normalize_locale(locale_code: str) -> str:
    """Convert BCP-47 locale code to POSIX format for Babel.

    BCP-47 uses hyphens (en-US), while Babel/POSIX uses underscores (en_US).

    Args:
        locale_code: BCP-47 locale code (e.g., "en-US", "pt-BR")

    Returns:
        POSIX-formatted locale code (e.g., "en_US", "pt_BR")

    Example:
        >>> normalize_locale("es-MX")
        'es_MX'
        >>> normalize_locale("en")
        'en'
    """
    return locale_code.strip().replace("-", "_")


@dataclass(frozen=True, slots=True)
class LocaleId:
    """Immutable (language, region) locale identifier.

    Language is lower-case, region upper-case (or a UN M.49 numeric code).
    Script and variant subtags are not part of matching and are dropped.

    Example:
        >>> LocaleId.parse("es-mx")
        LocaleId(language='es', region='MX')
        >>> str(LocaleId("en"))
        'en'
    """

    language: str
    region: str | None = None

    @classmethod
    def parse(cls, locale_code: str) -> LocaleId:
        """Parse a BCP-47 or POSIX locale code.

        Encoding suffixes (".UTF-8") and modifiers ("@euro") are ignored.

        Args:
            locale_code: Locale code (e.g., 'es-MX', 'es_MX', 'en')

        Returns:
            Parsed LocaleId

        Raises:
            ValueError: If the code is empty or not a valid identifier
        """
        parts = parse_locale(normalize_locale(locale_code))
        return cls(language=parts[0], region=parts[1])

    @classmethod
    def coerce(cls, value: LocaleId | str) -> LocaleId:
        """Return value unchanged if already a LocaleId, else parse it."""
        if isinstance(value, LocaleId):
            return value
        return cls.parse(value)

    def __str__(self) -> str:
        if self.region:
            return f"{self.language}-{self.region}"
        return self.language

    @property
    def posix(self) -> str:
        """POSIX form used by Babel ('es_MX')."""
        if self.region:
            return f"{self.language}_{self.region}"
        return self.language

    def same_language(self, other: LocaleId) -> bool:
        """Check language-only equality."""
        return self.language == other.language

    @property
    def language_only(self) -> LocaleId:
        """This locale with the region dropped."""
        if self.region is None:
            return self
        return LocaleId(self.language)

    def display_name(self, in_locale: LocaleId | None = None) -> str:
        """Human-readable name of this locale via Babel CLDR data.

        Args:
            in_locale: Locale to render the name in (default: this locale)

        Returns:
            Display name (e.g., 'español (México)'), or the locale code when
            Babel has no data for it.
        """
        try:
            babel_locale = get_babel_locale(self.posix)
            target = in_locale.posix if in_locale is not None else None
            name = babel_locale.get_display_name(target)
        except (UnknownLocaleError, ValueError):
            return str(self)
        return name or str(self)


@functools.lru_cache(maxsize=128)
def get_babel_locale(locale_code: str) -> Locale:
    """Get a Babel Locale object with caching.

    Thread-safe via lru_cache internal locking.

    Args:
        locale_code: Locale code (BCP-47 or POSIX format accepted)

    Returns:
        Babel Locale object

    Raises:
        babel.core.UnknownLocaleError: If locale is not recognized
        ValueError: If locale format is invalid
    """
    # Lazy import: Babel loads CLDR data at import time; defer until needed
    from babel import Locale  # noqa: PLC0415

    return Locale.parse(normalize_locale(locale_code))


@dataclass(frozen=True, slots=True)
class LocaleMatch:
    """Result of matching a requested locale against the supported set.

    Attributes:
        locale: Matched supported locale, None for NO_PREFERENCE
        kind: How the match was made
        requested: The locale the caller asked for (None if absent)
    """

    locale: LocaleId | None
    kind: LocaleMatchKind
    requested: LocaleId | None = None

    @property
    def is_fallback(self) -> bool:
        """True when the match is not exact (language-only or default)."""
        return self.kind in (LocaleMatchKind.LANGUAGE, LocaleMatchKind.DEFAULT)


def resolve_locale(
    requested: LocaleId | None,
    supported: Iterable[LocaleId],
    default: LocaleId | None = None,
) -> LocaleMatch:
    """Match a requested locale against supported locales.

    Args:
        requested: Requested locale, or None for "no preference"
        supported: Supported locales in preference order
        default: Configured default locale

    Returns:
        LocaleMatch. For requested=None the match carries locale=None so
        the caller decides the default behavior.

    Raises:
        ValueError: If supported is empty

    Example:
        >>> supported = [LocaleId("en", "US"), LocaleId("es", "ES")]
        >>> resolve_locale(LocaleId("es", "MX"), supported, LocaleId("en", "US")).locale
        LocaleId(language='es', region='ES')
    """
    candidates = tuple(supported)
    if not candidates:
        msg = "At least one supported locale is required"
        raise ValueError(msg)

    if requested is None:
        return LocaleMatch(locale=None, kind=LocaleMatchKind.NO_PREFERENCE)

    for candidate in candidates:
        if candidate == requested:
            return LocaleMatch(candidate, LocaleMatchKind.EXACT, requested)

    for candidate in candidates:
        if candidate.same_language(requested):
            return LocaleMatch(candidate, LocaleMatchKind.LANGUAGE, requested)

    fallback = default if default is not None and default in candidates else candidates[0]
    return LocaleMatch(fallback, LocaleMatchKind.DEFAULT, requested)


class LocaleResolver:
    """Supported-locale matcher bound to a fixed configuration.

    Example:
        >>> resolver = LocaleResolver([LocaleId("en", "US"), LocaleId("es", "ES")],
        ...                           LocaleId("en", "US"))
        >>> str(resolver.resolve(LocaleId("fr", "FR")).locale)
        'en-US'
    """

    __slots__ = ("_default", "_supported")

    def __init__(self, supported: Iterable[LocaleId], default: LocaleId | None = None) -> None:
        """Initialize resolver.

        Args:
            supported: Supported locales in preference order
            default: Default locale; must be one of supported when given

        Raises:
            ValueError: If supported is empty or default is not supported
        """
        # dict.fromkeys() removes duplicates while maintaining insertion order
        self._supported: tuple[LocaleId, ...] = tuple(dict.fromkeys(supported))
        if not self._supported:
            msg = "At least one supported locale is required"
            raise ValueError(msg)
        if default is not None and default not in self._supported:
            msg = f"Default locale '{default}' not in supported locales"
            raise ValueError(msg)
        self._default = default if default is not None else self._supported[0]

    @property
    def supported(self) -> tuple[LocaleId, ...]:
        """Supported locales in preference order."""
        return self._supported

    @property
    def default(self) -> LocaleId:
        """Configured default locale."""
        return self._default

    def resolve(self, requested: LocaleId | None) -> LocaleMatch:
        """Match requested against the configured locales."""
        return resolve_locale(requested, self._supported, self._default)

    def is_supported(self, locale: LocaleId) -> bool:
        """Check whether locale matches a supported locale by language."""
        return any(candidate.same_language(locale) for candidate in self._supported)


def get_system_locale(*, raise_on_failure: bool = False) -> str:
    """Detect system locale from OS and environment variables.

    Detection order:
    1. Python locale.getlocale() (OS-level locale)
    2. LC_ALL environment variable (overrides all)
    3. LC_MESSAGES environment variable (for message catalogs)
    4. LANG environment variable (default locale)

    Filters out "C" and "POSIX" pseudo-locales.

    Args:
        raise_on_failure: If True, raise RuntimeError when locale cannot be
            determined. If False (default), return DEFAULT_LOCALE_CODE.

    Returns:
        Detected locale code in POSIX format.

    Raises:
        RuntimeError: If raise_on_failure is True and locale cannot be determined.
    """
    import locale as locale_module  # noqa: PLC0415

    from contentlex.constants import DEFAULT_LOCALE_CODE  # noqa: PLC0415

    try:
        system_locale, _ = locale_module.getlocale()
        if system_locale and system_locale not in ("C", "POSIX"):
            return normalize_locale(system_locale.split(".")[0])
    except (ValueError, AttributeError):
        pass

    for var in ("LC_ALL", "LC_MESSAGES", "LANG"):
        value = os.environ.get(var)
        if value and value not in ("C", "POSIX", ""):
            return normalize_locale(value.split(".")[0])

    if raise_on_failure:
        msg = (
            "Could not determine system locale. "
            "Set LC_ALL, LC_MESSAGES, or LANG environment variable."
        )
        raise RuntimeError(msg)

    return DEFAULT_LOCALE_CODE
