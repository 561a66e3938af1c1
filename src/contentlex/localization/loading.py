"""Document loading infrastructure for ContentLocalization.

Provides the protocol for content document sources, a filesystem
implementation with path-traversal security, an in-memory implementation,
the validated document type, and result/summary data structures for
tracking load attempts.

Components:
    DocumentSource - Protocol for loading raw documents (structural typing)
    PathDocumentSource - JSON-on-disk source with path-traversal prevention
    MemoryDocumentSource - In-memory source with per-document load counts
    ContentDocument - Immutable validated document for one (domain, locale)
    DocumentLoadResult - Immutable result of a single load attempt
    LoadSummary - Immutable aggregate of load results from a preload

Python 3.13+.
"""

from __future__ import annotations

import json
import threading
from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Protocol

from contentlex.domains import ContentDomain
from contentlex.enums import DocumentShape, LoadStatus
from contentlex.errors import DocumentMalformedError, DocumentNotFoundError
from contentlex.localization.types import (
    ContentKey,
    ContentValue,
    DomainName,
    LocaleCode,
    RawDocument,
)

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Protocol
    "DocumentSource",
    # Concrete sources
    "PathDocumentSource",
    "MemoryDocumentSource",
    # Documents
    "ContentDocument",
    "build_document",
    # Load result types
    "DocumentLoadResult",
    "LoadSummary",
]


class DocumentSource(Protocol):
    """Protocol for loading raw content documents for specific locales.

    Implementations return the parsed key -> value mapping for a
    (domain, locale) pair, or raise DocumentNotFoundError /
    DocumentMalformedError. The engine never interprets the storage format.

    Example:
        >>> class ApiSource:
        ...     def load(self, domain: str, locale: str) -> Mapping[str, object]:
        ...         return fetch_json(f"/content/{locale}/{domain}")
        ...     def describe_path(self, domain: str, locale: str) -> str:
        ...         return f"api:/content/{locale}/{domain}"
    """

    def load(self, domain: DomainName, locale: LocaleCode) -> RawDocument:
        """Load the raw document for a domain and locale.

        Args:
            domain: Domain name (e.g., 'card-name')
            locale: Locale code (e.g., 'es', 'es-MX')

        Returns:
            Parsed key -> value mapping

        Raises:
            DocumentNotFoundError: If no document exists for this pair
            DocumentMalformedError: If the document cannot be parsed
        """

    def describe_path(self, domain: DomainName, locale: LocaleCode) -> str:
        """Return human-readable location for diagnostics.

        Default implementation returns "{locale}/{domain}".
        """
        return f"{locale}/{domain}"


@dataclass(frozen=True, slots=True)
class ContentDocument:
    """Validated, immutable key -> value document for one (domain, locale).

    String-list values are stored as tuples. Once built a document is
    never modified; the cache replaces documents whole.

    Attributes:
        domain: Domain the document belongs to
        locale: Locale code the document was loaded for
        entries: Read-only key -> value mapping
    """

    domain: ContentDomain
    locale: LocaleCode
    entries: Mapping[ContentKey, ContentValue] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def empty(cls, domain: ContentDomain, locale: LocaleCode) -> ContentDocument:
        """Explicit empty document returned for failed loads."""
        return cls(domain=domain, locale=locale)

    @property
    def is_empty(self) -> bool:
        """True when the document has no entries."""
        return not self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def get_string(self, key: ContentKey) -> str | None:
        """Get a non-empty string value, None if absent, empty or not a string."""
        value = self.entries.get(key)
        if isinstance(value, str) and value:
            return value
        return None

    def get_list(self, key: ContentKey) -> tuple[str, ...]:
        """Get the non-empty items of a list value (empty tuple if absent)."""
        value = self.entries.get(key)
        if isinstance(value, tuple):
            return tuple(item for item in value if item)
        return ()


def build_document(
    domain: ContentDomain,
    locale: LocaleCode,
    raw: object,
) -> ContentDocument:
    """Validate a raw document against its domain shape.

    Args:
        domain: Target domain
        locale: Locale code
        raw: Parsed document returned by a DocumentSource

    Returns:
        Immutable ContentDocument

    Raises:
        DocumentMalformedError: If raw is not a string-keyed mapping whose
            values all match the domain shape
    """
    if not isinstance(raw, Mapping):
        msg = f"Document {locale}/{domain} is not a mapping (got {type(raw).__name__})"
        raise DocumentMalformedError(msg, domain=domain.name, locale=locale)

    entries: dict[ContentKey, ContentValue] = {}
    for key, value in raw.items():
        if not isinstance(key, str):
            msg = f"Document {locale}/{domain} has non-string key {key!r}"
            raise DocumentMalformedError(msg, domain=domain.name, locale=locale)
        match domain.shape:
            case DocumentShape.STRING if isinstance(value, str):
                entries[key] = value
            case DocumentShape.STRING_LIST if isinstance(value, (list, tuple)) and all(
                isinstance(item, str) for item in value
            ):
                entries[key] = tuple(value)
            case _:
                msg = (
                    f"Document {locale}/{domain} key '{key}' has "
                    f"{type(value).__name__} value, expected {domain.shape}"
                )
                raise DocumentMalformedError(msg, domain=domain.name, locale=locale)

    return ContentDocument(domain=domain, locale=locale, entries=MappingProxyType(entries))


@dataclass(frozen=True, slots=True)
class PathDocumentSource:
    """File system document source using path templates.

    Implements DocumentSource for JSON documents on disk. The path template
    contains a {locale} placeholder; each domain is a file named
    "{domain}.json" inside the locale directory.

    Security:
        Validates both locale and domain to prevent directory traversal.
        All resolved paths are validated against a fixed root directory.

    Example:
        >>> source = PathDocumentSource("content/{locale}")
        >>> source.load("card-name", "es")
        # Loads from: content/es/card-name.json

    Attributes:
        base_path: Path template with {locale} placeholder
        root_dir: Fixed root directory for path traversal validation.
                  Defaults to the static prefix of base_path.
        root_key: Optional top-level key wrapping the document
                  (e.g., 'cards' for {"cards": {...}})
    """

    base_path: str
    root_dir: str | None = None
    root_key: str | None = None
    _resolved_root: Path = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Cache resolved root directory and validate template at initialization.

        Raises:
            ValueError: If base_path does not contain {locale} placeholder
        """
        if "{locale}" not in self.base_path:
            msg = (
                f"base_path must contain '{{locale}}' placeholder for locale substitution, "
                f"got: '{self.base_path}'"
            )
            raise ValueError(msg)

        if self.root_dir is not None:
            resolved = Path(self.root_dir).resolve()
        else:
            static_prefix = self.base_path.split("{locale}")[0].rstrip("/\\")
            resolved = Path(static_prefix).resolve() if static_prefix else Path.cwd().resolve()
        object.__setattr__(self, "_resolved_root", resolved)

    @staticmethod
    def _validate_segment(kind: str, value: str) -> None:
        """Reject empty values, separators and traversal sequences.

        Raises:
            ValueError: If value is unsafe as a single path segment
        """
        if not value:
            msg = f"{kind} cannot be empty"
            raise ValueError(msg)
        if ".." in value:
            msg = f"Path traversal sequences not allowed in {kind}: '{value}'"
            raise ValueError(msg)
        if "/" in value or "\\" in value:
            msg = f"Path separators not allowed in {kind}: '{value}'"
            raise ValueError(msg)

    def _document_path(self, domain: DomainName, locale: LocaleCode) -> Path:
        locale_path = self.base_path.replace("{locale}", locale)
        return Path(locale_path) / f"{domain}.json"

    def describe_path(self, domain: DomainName, locale: LocaleCode) -> str:
        """Return the locale-substituted file path."""
        return str(self._document_path(domain, locale))

    def load(self, domain: DomainName, locale: LocaleCode) -> RawDocument:
        """Load and parse a JSON document from disk.

        Raises:
            ValueError: If locale or domain contains path traversal sequences
            DocumentNotFoundError: If the file doesn't exist or can't be read
            DocumentMalformedError: If the file is not a JSON object
        """
        self._validate_segment("locale", locale)
        self._validate_segment("domain", domain)

        full_path = self._document_path(domain, locale).resolve()
        try:
            full_path.relative_to(self._resolved_root)
        except ValueError:
            msg = (
                f"Path traversal detected: resolved path escapes root directory. "
                f"locale='{locale}', domain='{domain}'"
            )
            raise ValueError(msg) from None

        try:
            text = full_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            msg = f"Document not found: {full_path}"
            raise DocumentNotFoundError(msg, domain=domain, locale=locale) from None
        except UnicodeDecodeError as e:
            msg = f"Document is not valid UTF-8: {full_path}: {e}"
            raise DocumentMalformedError(msg, domain=domain, locale=locale) from e
        except OSError as e:
            msg = f"Document unreadable: {full_path}: {e}"
            raise DocumentNotFoundError(msg, domain=domain, locale=locale) from e

        try:
            data = json.loads(text)
        except (json.JSONDecodeError, RecursionError) as e:
            msg = f"Invalid JSON in {full_path}: {e}"
            raise DocumentMalformedError(msg, domain=domain, locale=locale) from e

        if self.root_key is not None:
            if not isinstance(data, Mapping) or self.root_key not in data:
                msg = f"Missing root key '{self.root_key}' in {full_path}"
                raise DocumentMalformedError(msg, domain=domain, locale=locale)
            data = data[self.root_key]

        if not isinstance(data, Mapping):
            msg = f"Top level of {full_path} is not an object"
            raise DocumentMalformedError(msg, domain=domain, locale=locale)
        return data


class MemoryDocumentSource:
    """In-memory document source.

    Documents are supplied as {locale: {domain: {key: value}}}. Counts
    loads per (domain, locale) for diagnostics.

    Thread-safe.

    Example:
        >>> source = MemoryDocumentSource({"en": {"card-name": {"the_fool": "The Fool"}}})
        >>> source.load("card-name", "en")["the_fool"]
        'The Fool'
    """

    __slots__ = ("_documents", "_load_counts", "_lock")

    def __init__(self, documents: Mapping[LocaleCode, Mapping[DomainName, object]]) -> None:
        """Initialize from nested locale -> domain -> document mapping."""
        self._documents = {locale: dict(domains) for locale, domains in documents.items()}
        self._load_counts: Counter[tuple[DomainName, LocaleCode]] = Counter()
        self._lock = threading.Lock()

    def load(self, domain: DomainName, locale: LocaleCode) -> RawDocument:
        """Return the stored document.

        Raises:
            DocumentNotFoundError: If locale or domain has no document
            DocumentMalformedError: If the stored document is not a mapping
        """
        with self._lock:
            self._load_counts[(domain, locale)] += 1
        document = self._documents.get(locale, {}).get(domain)
        if document is None:
            msg = f"No document for {locale}/{domain}"
            raise DocumentNotFoundError(msg, domain=domain, locale=locale)
        if not isinstance(document, Mapping):
            msg = f"Document {locale}/{domain} is not a mapping"
            raise DocumentMalformedError(msg, domain=domain, locale=locale)
        return document

    def describe_path(self, domain: DomainName, locale: LocaleCode) -> str:
        """Return "memory:{locale}/{domain}"."""
        return f"memory:{locale}/{domain}"

    def load_count(self, domain: DomainName, locale: LocaleCode) -> int:
        """Number of load() calls made for a (domain, locale) pair."""
        with self._lock:
            return self._load_counts[(domain, locale)]

    @property
    def total_loads(self) -> int:
        """Total number of load() calls."""
        with self._lock:
            return sum(self._load_counts.values())


@dataclass(frozen=True, slots=True)
class DocumentLoadResult:
    """Result of loading a single content document.

    Attributes:
        domain: Domain name
        locale: Locale code
        status: Load status (success, not_found, error)
        error: Exception if status is not SUCCESS, None otherwise
        source_path: Human-readable location of the document
    """

    domain: DomainName
    locale: LocaleCode
    status: LoadStatus
    error: Exception | None = None
    source_path: str | None = None

    @property
    def is_success(self) -> bool:
        """Check if document loaded successfully."""
        return self.status == LoadStatus.SUCCESS

    @property
    def is_not_found(self) -> bool:
        """Check if document was not found (expected for partial locales)."""
        return self.status == LoadStatus.NOT_FOUND

    @property
    def is_error(self) -> bool:
        """Check if document load failed with an error."""
        return self.status == LoadStatus.ERROR


@dataclass(frozen=True, slots=True)
class LoadSummary:
    """Immutable aggregate of document load results.

    Example:
        >>> summary = l10n.preload()
        >>> if summary.has_errors:
        ...     for result in summary.get_errors():
        ...         print(f"Failed: {result.source_path}: {result.error}")
    """

    results: tuple[DocumentLoadResult, ...]

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        return (
            f"LoadSummary(total={self.total_attempted}, "
            f"ok={self.successful}, "
            f"not_found={self.not_found}, "
            f"errors={self.errors})"
        )

    @property
    def total_attempted(self) -> int:
        """Total number of load attempts."""
        return len(self.results)

    @property
    def successful(self) -> int:
        """Number of successful loads."""
        return sum(1 for r in self.results if r.is_success)

    @property
    def not_found(self) -> int:
        """Number of documents not found."""
        return sum(1 for r in self.results if r.is_not_found)

    @property
    def errors(self) -> int:
        """Number of malformed or failed loads."""
        return sum(1 for r in self.results if r.is_error)

    def get_errors(self) -> tuple[DocumentLoadResult, ...]:
        """Get all results with errors."""
        return tuple(r for r in self.results if r.is_error)

    def get_not_found(self) -> tuple[DocumentLoadResult, ...]:
        """Get all results where the document was not found."""
        return tuple(r for r in self.results if r.is_not_found)

    def get_by_locale(self, locale: LocaleCode) -> tuple[DocumentLoadResult, ...]:
        """Get all results for a specific locale."""
        return tuple(r for r in self.results if r.locale == locale)

    @property
    def has_errors(self) -> bool:
        """Check if any document failed with an error."""
        return self.errors > 0

    @property
    def all_successful(self) -> bool:
        """True if every attempted document loaded."""
        return self.errors == 0 and self.not_found == 0
