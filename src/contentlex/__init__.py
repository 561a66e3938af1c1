"""ContentLexEngine - localized content resolution with fallback chains.

Turns a stable content key (a card identifier, a journal-prompt list, a
guide/topic pairing) plus a requested locale into display text, while
tolerating incomplete translations, unsupported locales and malformed
documents.

Public API:
    ContentLocalization - Multi-locale lookups, rotation and interpretations
    EngineConfig - Immutable engine configuration
    PathDocumentSource - JSON documents under a {locale} directory template
    MemoryDocumentSource - In-memory documents
    LocaleId - Parsed (language, region) locale identifier
    ContentDomain - Named content domain with a value shape

Exceptions:
    ContentError - Base exception class
    DocumentError - Document could not be loaded
    DocumentNotFoundError - Document does not exist
    DocumentMalformedError - Document exists but is invalid

Submodules:
    contentlex.domains - Built-in content domains
    contentlex.localization - Document sources and the orchestrator
    contentlex.runtime - Cache, fallback resolver, rotation, templates, statistics
"""

# Essential Public API - Minimal exports for clean namespace
from .config import EngineConfig
from .domains import ALL_DOMAINS, ContentDomain, get_domain
from .enums import DocumentShape, ErrorKind, FallbackTier, Persona, Topic
from .errors import ContentError, DocumentError, DocumentMalformedError, DocumentNotFoundError
from .locale_utils import LocaleId
from .localization import ContentLocalization, MemoryDocumentSource, PathDocumentSource
from .runtime import ErrorStatistics, ResolutionOutcome

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("contentlex")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "ALL_DOMAINS",
    "ContentDomain",
    "ContentError",
    "ContentLocalization",
    "DocumentError",
    "DocumentMalformedError",
    "DocumentNotFoundError",
    "DocumentShape",
    "EngineConfig",
    "ErrorKind",
    "ErrorStatistics",
    "FallbackTier",
    "LocaleId",
    "MemoryDocumentSource",
    "PathDocumentSource",
    "Persona",
    "ResolutionOutcome",
    "Topic",
    "__version__",
    "get_domain",
]
