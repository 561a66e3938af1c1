"""Multi-locale content package for ContentLocalization.

Provides the full localization stack: type aliases, document loading
infrastructure, and the multi-locale orchestrator.

Submodules:
    types        - PEP 695 type aliases (ContentKey, LocaleCode, DomainName, ContentValue)
    loading      - DocumentSource protocol, PathDocumentSource, MemoryDocumentSource,
                   ContentDocument, DocumentLoadResult, LoadSummary
    orchestrator - ContentLocalization (multi-locale orchestration)

Python 3.13+.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability

from contentlex.enums import LoadStatus
from contentlex.localization.loading import (
    ContentDocument,
    DocumentLoadResult,
    DocumentSource,
    LoadSummary,
    MemoryDocumentSource,
    PathDocumentSource,
    build_document,
)
from contentlex.localization.orchestrator import ContentLocalization
from contentlex.localization.types import ContentKey, ContentValue, DomainName, LocaleCode

__all__ = [
    # Main orchestrator
    "ContentLocalization",
    # Source protocol and implementations
    "DocumentSource",
    "PathDocumentSource",
    "MemoryDocumentSource",
    # Validated documents
    "ContentDocument",
    "build_document",
    # Load tracking (preload diagnostics)
    "LoadStatus",
    "LoadSummary",
    "DocumentLoadResult",
    # Type aliases for user code type annotations
    "ContentKey",
    "ContentValue",
    "DomainName",
    "LocaleCode",
]
