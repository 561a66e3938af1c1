"""Engine configuration for ContentLocalization.

Provides a single frozen dataclass that carries every construction-time
setting. Locales are fixed at construction and never discovered at
runtime; invalid configurations fail immediately.

Python 3.13+.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from contentlex.constants import (
    DEFAULT_ERROR_RATE_THRESHOLD,
    DEFAULT_LOCALE_CODE,
    DEFAULT_SUPPORTED_LOCALE_CODES,
)
from contentlex.domains import ALL_DOMAINS, ContentDomain
from contentlex.locale_utils import LocaleId

if TYPE_CHECKING:
    from collections.abc import Iterable

__all__ = ["EngineConfig"]


def _default_supported() -> tuple[LocaleId, ...]:
    return tuple(LocaleId.parse(code) for code in DEFAULT_SUPPORTED_LOCALE_CODES)


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Immutable configuration for ContentLocalization.

    ``EngineConfig()`` produces the application defaults (English and
    Spanish, English as default and base language).

    Attributes:
        supported_locales: Supported locales in preference order. Duplicates
            are removed, order is preserved.
        default_locale: Locale used when the caller has no preference or asks
            for an unsupported language (default: first supported locale).
        base_locale: Locale whose documents back every other locale
            (default: default_locale).
        error_rate_threshold: Threshold for is_error_rate_high() (default: 0.1).
        preload_domains: Domains loaded by preload() when none are given
            (default: all domains).

    Example:
        >>> config = EngineConfig.from_codes(["en-US", "es-ES"], default="en-US")
        >>> str(config.base_locale)
        'en-US'
    """

    supported_locales: tuple[LocaleId, ...] = field(default_factory=_default_supported)
    default_locale: LocaleId | None = None
    base_locale: LocaleId | None = None
    error_rate_threshold: float = DEFAULT_ERROR_RATE_THRESHOLD
    preload_domains: tuple[ContentDomain, ...] = ALL_DOMAINS

    def __post_init__(self) -> None:
        """Normalize and validate configuration values at construction time.

        Raises:
            ValueError: If no locale is supported, the default or base locale
                is not supported, or the threshold is negative.
        """
        supported = tuple(dict.fromkeys(self.supported_locales))
        if not supported:
            msg = "At least one supported locale is required"
            raise ValueError(msg)
        object.__setattr__(self, "supported_locales", supported)

        default = self.default_locale if self.default_locale is not None else supported[0]
        if default not in supported:
            msg = f"Default locale '{default}' not in supported locales"
            raise ValueError(msg)
        object.__setattr__(self, "default_locale", default)

        base = self.base_locale if self.base_locale is not None else default
        if base not in supported:
            msg = f"Base locale '{base}' not in supported locales"
            raise ValueError(msg)
        object.__setattr__(self, "base_locale", base)

        if self.error_rate_threshold < 0:
            msg = "error_rate_threshold must be non-negative"
            raise ValueError(msg)
        object.__setattr__(self, "preload_domains", tuple(self.preload_domains))

    @classmethod
    def from_codes(
        cls,
        supported: Iterable[str] = DEFAULT_SUPPORTED_LOCALE_CODES,
        *,
        default: str | None = None,
        base: str | None = None,
        error_rate_threshold: float = DEFAULT_ERROR_RATE_THRESHOLD,
        preload_domains: Iterable[ContentDomain] = ALL_DOMAINS,
    ) -> EngineConfig:
        """Build a configuration from locale code strings.

        Raises:
            ValueError: If a code is not a valid locale identifier, or the
                resulting configuration is invalid
        """
        return cls(
            supported_locales=tuple(LocaleId.parse(code) for code in supported),
            default_locale=LocaleId.parse(default) if default is not None else None,
            base_locale=LocaleId.parse(base) if base is not None else None,
            error_rate_threshold=error_rate_threshold,
            preload_domains=tuple(preload_domains),
        )

    @property
    def default(self) -> LocaleId:
        """Default locale (always set after construction)."""
        return self.default_locale or LocaleId(DEFAULT_LOCALE_CODE)

    @property
    def base(self) -> LocaleId:
        """Base locale (always set after construction)."""
        return self.base_locale or self.default
