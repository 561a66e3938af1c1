"""Resolution runtime: cache, fallback chain, rotation, templates, statistics.

Submodules:
    cache      - DocumentCache (thread-safe, singleflight loading)
    resolver   - FallbackResolver, ResolutionOutcome, format_key_as_display_text
    rotation   - day_ordinal, select_index
    templates  - TemplateComposer, InterpretationTemplate, substitute
    statistics - StatisticsMonitor, ErrorStatistics, FallbackEvent

Python 3.13+.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability

from contentlex.runtime.cache import DocumentCache
from contentlex.runtime.resolver import (
    FallbackResolver,
    ResolutionOutcome,
    format_key_as_display_text,
)
from contentlex.runtime.rotation import day_ordinal, select_index
from contentlex.runtime.statistics import ErrorStatistics, FallbackEvent, StatisticsMonitor
from contentlex.runtime.templates import (
    InterpretationTemplate,
    TemplateComposer,
    find_placeholders,
    format_keywords,
    substitute,
    template_key,
)

__all__ = [
    # Cache
    "DocumentCache",
    # Fallback chain
    "FallbackResolver",
    "ResolutionOutcome",
    "format_key_as_display_text",
    # Rotation
    "day_ordinal",
    "select_index",
    # Templates
    "InterpretationTemplate",
    "TemplateComposer",
    "find_placeholders",
    "format_keywords",
    "substitute",
    "template_key",
    # Statistics
    "ErrorStatistics",
    "FallbackEvent",
    "StatisticsMonitor",
]
