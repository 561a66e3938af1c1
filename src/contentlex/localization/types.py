"""Type aliases for the content localization domain.

Provides semantic type aliases used throughout the engine and by user
code when annotating ContentLocalization call sites.

Python 3.13+.
"""

from collections.abc import Mapping

__all__ = [
    "ContentKey",
    "ContentValue",
    "DomainName",
    "LocaleCode",
    "RawDocument",
]

type ContentKey = str
"""Stable content identifier (e.g., 'the_fool', 'sage.love.opening')."""

type LocaleCode = str
"""BCP-47 locale code (e.g., 'en', 'es-MX')."""

type DomainName = str
"""Content domain name (e.g., 'card-name', 'journal-prompt')."""

type ContentValue = str | tuple[str, ...]
"""A resolved document value: a string, or an ordered tuple of strings."""

type RawDocument = Mapping[str, object]
"""Parsed but not yet validated document returned by a DocumentSource."""
