"""Enumerations for ContentLexEngine type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, so they can be used directly as
document keys, log fields and statistics dictionary keys.

Python 3.13+.
"""

from enum import StrEnum


class DocumentShape(StrEnum):
    """Value shape of every entry in a content document.

    StrEnum provides automatic string conversion: str(DocumentShape.STRING) == "string"
    """

    STRING = "string"
    """key -> str (card names, topic descriptions)"""

    STRING_LIST = "string-list"
    """key -> ordered list of str (journal prompts, template variants)"""


class FallbackTier(StrEnum):
    """Precedence level that satisfied a resolution request."""

    PRIMARY_LOCALE = "primary-locale"
    """Value found in the requested (resolved) locale."""

    BASE_LANGUAGE = "base-language"
    """Value found in the configured base language."""

    CUSTOM_FALLBACK = "custom-fallback"
    """Caller-supplied fallback text."""

    FORMATTED_KEY = "formatted-key"
    """Key rendered as display text (guaranteed floor for strings)."""

    NONE = "none"
    """Nothing available (list resolution only)."""


class ErrorKind(StrEnum):
    """Kinds of error recorded by the statistics monitor."""

    DOCUMENT_NOT_FOUND = "document-not-found"
    DOCUMENT_MALFORMED = "document-malformed"
    KEY_MISSING = "key-missing"
    PARAMETER_SUBSTITUTION_INCOMPLETE = "parameter-substitution-incomplete"
    UNSUPPORTED_LOCALE_REQUESTED = "unsupported-locale-requested"


class LoadStatus(StrEnum):
    """Outcome of a single document load attempt."""

    SUCCESS = "success"
    NOT_FOUND = "not_found"
    ERROR = "error"


class LocaleMatchKind(StrEnum):
    """How a requested locale was matched against the supported set."""

    EXACT = "exact"
    LANGUAGE = "language"
    DEFAULT = "default"
    NO_PREFERENCE = "no-preference"


class TemplateSlot(StrEnum):
    """Interpretation template slots, in output order."""

    OPENING = "opening"
    CONTEXT = "context"
    ADVICE = "advice"
    CLOSING = "closing"


class TemplateSource(StrEnum):
    """Where the variants for a template slot came from."""

    TOPIC = "topic"
    PERSONA_DEFAULT = "persona-default"
    BUILT_IN = "built-in"


class Persona(StrEnum):
    """Guide personas that voice interpretations."""

    SAGE = "sage"
    HEALER = "healer"
    MENTOR = "mentor"
    VISIONARY = "visionary"


class Topic(StrEnum):
    """Reading topics."""

    SELF = "self"
    LOVE = "love"
    WORK = "work"
    SOCIAL = "social"


__all__ = [
    "DocumentShape",
    "ErrorKind",
    "FallbackTier",
    "LoadStatus",
    "LocaleMatchKind",
    "Persona",
    "TemplateSlot",
    "Topic",
]
