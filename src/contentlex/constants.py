"""Shared constants for ContentLexEngine.

Centralizes the engine's tunable defaults so that the runtime and
localization packages share one source of truth without import cycles.

Constants are grouped by concern:
- Locale defaults: configured fallbacks when the caller supplies none
- Fallback strings: guaranteed-floor text for template slots
- Formatting: separators used by key formatting and interpretation output
- Monitoring: default health threshold for the statistics monitor

Python 3.13+.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Locale defaults
    "DEFAULT_LOCALE_CODE",
    "DEFAULT_SUPPORTED_LOCALE_CODES",
    # Fallback strings
    "FALLBACK_OPENING_PHRASE",
    "FALLBACK_CONTEXT_TEMPLATE",
    "FALLBACK_ADVICE_TEMPLATE",
    "FALLBACK_CLOSING_PHRASE",
    # Formatting
    "KEY_SEPARATORS",
    "PARAGRAPH_SEPARATOR",
    "SENTENCE_SEPARATOR",
    "TEMPLATE_DEFAULT_TOPIC",
    # Monitoring
    "DEFAULT_ERROR_RATE_THRESHOLD",
    "MAX_ERROR_KEYS",
]

# ============================================================================
# LOCALE DEFAULTS
# ============================================================================

# Base language of every bundled content corpus. English is the only locale
# guaranteed to be complete, so it terminates the locale fallback chain.
DEFAULT_LOCALE_CODE: str = "en"

# Locales shipped with the application, in preference order.
DEFAULT_SUPPORTED_LOCALE_CODES: tuple[str, ...] = ("en", "es")

# ============================================================================
# FALLBACK STRINGS
# ============================================================================

# Built-in interpretation phrases used when neither the persona/topic
# variant nor the persona default provides a slot in any locale.
FALLBACK_OPENING_PHRASE: str = "The cards speak to you with wisdom."
FALLBACK_CONTEXT_TEMPLATE: str = "The {name} {orientation} reveals {keywords}."
FALLBACK_ADVICE_TEMPLATE: str = "Consider how this guidance applies to your {topic}."
FALLBACK_CLOSING_PHRASE: str = "Trust in the guidance you receive."

# ============================================================================
# FORMATTING
# ============================================================================

# Characters treated as word separators when a content key is rendered
# as display text ("user_profile-settings" -> "User Profile Settings").
KEY_SEPARATORS: str = "_-"

# Blank line between interpretation paragraphs (opening / body / closing).
PARAGRAPH_SEPARATOR: str = "\n\n"

# Joins sentences inside the body paragraph (context, meaning, advice).
SENTENCE_SEPARATOR: str = " "

# Topic segment of the persona-wide template keys ("sage.default.opening").
TEMPLATE_DEFAULT_TOPIC: str = "default"

# ============================================================================
# MONITORING
# ============================================================================

# Fallbacks-per-error ratio above which the engine reports itself unhealthy.
DEFAULT_ERROR_RATE_THRESHOLD: float = 0.1

# Upper bound on distinct keys tracked in errors_by_key.
# Keys beyond the bound are still counted in the totals.
MAX_ERROR_KEYS: int = 10_000
