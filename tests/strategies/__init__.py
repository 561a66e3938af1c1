"""Hypothesis strategies for ContentLexEngine property-based testing.

This package provides reusable strategies for generating test data
across multiple test modules.

- content: content keys, locale codes, documents and dates

Usage:
    from tests.strategies import content_keys, locale_codes
    from tests.strategies.content import document_pairs

Event-Emitting Strategies (HypoFuzz-Optimized):
    These strategies emit hypothesis.event() calls for coverage-guided fuzzing:
    - content_keys, locale_codes, document_pairs
"""

from .content import calendar_dates, content_keys, document_pairs, locale_codes

__all__ = [
    "calendar_dates",
    "content_keys",
    "document_pairs",
    "locale_codes",
]
