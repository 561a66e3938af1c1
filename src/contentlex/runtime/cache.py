"""Thread-safe document cache with coalesced loading.

Memoizes validated ContentDocument instances per (domain, locale) and
loads them from a DocumentSource on first miss.

Architecture:
    - One threading.Lock guards the document map, the in-flight map,
      the generation counter and the metrics
    - Singleflight: concurrent misses for the same key wait on one
      in-flight load (threading.Event) instead of each calling the source
    - The source is called outside the lock, so loads for different keys
      proceed in parallel
    - Failed loads are never cached; the next get() retries

Cache Key Structure:
    (domain_name, locale_code)

Clear Semantics:
    clear() bumps a generation counter. A load that started before the
    clear still hands its document to its own callers, but only stores it
    if the generation is unchanged, so a cleared cache is never repopulated
    with pre-clear data.

Python 3.13+.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from contentlex.enums import ErrorKind, LoadStatus
from contentlex.errors import DocumentMalformedError, DocumentNotFoundError
from contentlex.localization.loading import (
    ContentDocument,
    DocumentLoadResult,
    LoadSummary,
    build_document,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from contentlex.domains import ContentDomain
    from contentlex.localization.loading import DocumentSource
    from contentlex.localization.types import DomainName, LocaleCode
    from contentlex.runtime.statistics import StatisticsMonitor

__all__ = ["DocumentCache"]

logger = logging.getLogger(__name__)

type _CacheKey = tuple[DomainName, LocaleCode]


class _InFlightLoad:
    """Rendezvous point for callers waiting on one source load."""

    __slots__ = ("document", "done", "result")

    def __init__(self) -> None:
        self.done = threading.Event()
        self.result: DocumentLoadResult | None = None
        self.document: ContentDocument | None = None


class DocumentCache:
    """Per-(domain, locale) document cache over a DocumentSource.

    Example:
        >>> cache = DocumentCache(source, StatisticsMonitor())
        >>> document = cache.get(CARD_NAME, "es")
        >>> document.get_string("the_fool")
        'El Loco'
    """

    __slots__ = (
        "_documents",
        "_failures",
        "_generation",
        "_hits",
        "_in_flight",
        "_loads",
        "_lock",
        "_misses",
        "_source",
        "_statistics",
    )

    def __init__(self, source: DocumentSource, statistics: StatisticsMonitor) -> None:
        """Initialize document cache.

        Args:
            source: Document source to load from
            statistics: Shared monitor that receives load failures
        """
        self._source = source
        self._statistics = statistics
        self._lock = threading.Lock()
        self._documents: dict[_CacheKey, ContentDocument] = {}
        self._in_flight: dict[_CacheKey, _InFlightLoad] = {}
        self._generation = 0
        self._hits = 0
        self._misses = 0
        self._loads = 0
        self._failures = 0

    def get(self, domain: ContentDomain, locale: LocaleCode) -> ContentDocument:
        """Get the document for (domain, locale), loading it on first use.

        Never raises for data problems: a failed load returns an empty
        document and records the failure in the statistics monitor.

        Args:
            domain: Content domain
            locale: Locale code

        Returns:
            Cached or freshly loaded document, or an empty document
        """
        _result, document = self._fetch(domain, locale)
        if document is None:
            return ContentDocument.empty(domain, locale)
        return document

    def _fetch(
        self,
        domain: ContentDomain,
        locale: LocaleCode,
    ) -> tuple[DocumentLoadResult, ContentDocument | None]:
        """Return the cached document or join/lead the single in-flight load."""
        key: _CacheKey = (domain.name, locale)

        with self._lock:
            cached = self._documents.get(key)
            if cached is not None:
                self._hits += 1
                return DocumentLoadResult(domain.name, locale, LoadStatus.SUCCESS), cached

            self._misses += 1
            flight = self._in_flight.get(key)
            leader = flight is None
            if flight is None:
                flight = _InFlightLoad()
                self._in_flight[key] = flight
            generation = self._generation

        if not leader:
            flight.done.wait()
            # result is always set before done is signalled
            return flight.result, flight.document  # type: ignore[return-value]

        result = DocumentLoadResult(domain.name, locale, LoadStatus.ERROR)
        document: ContentDocument | None = None
        try:
            result, document = self._load(domain, locale)
            with self._lock:
                if document is not None and generation == self._generation:
                    self._documents[key] = document
        finally:
            with self._lock:
                if self._in_flight.get(key) is flight:
                    del self._in_flight[key]
            flight.result = result
            flight.document = document
            flight.done.set()
        return result, document

    def _load(
        self,
        domain: ContentDomain,
        locale: LocaleCode,
    ) -> tuple[DocumentLoadResult, ContentDocument | None]:
        """Call the source once and convert failures into load results."""
        source_path = self._source.describe_path(domain.name, locale)
        with self._lock:
            self._loads += 1

        try:
            raw = self._source.load(domain.name, locale)
            document = build_document(domain, locale, raw)
        except DocumentNotFoundError as e:
            self._record_failure(ErrorKind.DOCUMENT_NOT_FOUND, source_path, locale, e)
            return (
                DocumentLoadResult(
                    domain.name, locale, LoadStatus.NOT_FOUND, error=e, source_path=source_path
                ),
                None,
            )
        except (DocumentMalformedError, OSError, ValueError) as e:
            self._record_failure(ErrorKind.DOCUMENT_MALFORMED, source_path, locale, e)
            return (
                DocumentLoadResult(
                    domain.name, locale, LoadStatus.ERROR, error=e, source_path=source_path
                ),
                None,
            )
        except Exception as e:
            # any source failure degrades to an empty document
            logger.exception("Unexpected error loading %s", source_path)
            self._record_failure(ErrorKind.DOCUMENT_MALFORMED, source_path, locale, e)
            return (
                DocumentLoadResult(
                    domain.name, locale, LoadStatus.ERROR, error=e, source_path=source_path
                ),
                None,
            )

        logger.debug("Loaded document %s (%d entries)", source_path, len(document))
        return (
            DocumentLoadResult(domain.name, locale, LoadStatus.SUCCESS, source_path=source_path),
            document,
        )

    def _record_failure(
        self,
        kind: ErrorKind,
        source_path: str,
        locale: LocaleCode,
        error: Exception,
    ) -> None:
        with self._lock:
            self._failures += 1
        self._statistics.record_error(kind, key=source_path, locale=locale, error=error)

    def contains(self, domain: ContentDomain, locale: LocaleCode) -> bool:
        """Check whether a document is cached, without loading it."""
        with self._lock:
            return (domain.name, locale) in self._documents

    def clear(self) -> None:
        """Discard all cached documents.

        Safe to call while lookups are in flight.
        """
        with self._lock:
            self._documents.clear()
            self._in_flight.clear()
            self._generation += 1
        logger.debug("Document cache cleared")

    def preload(
        self,
        domains: Iterable[ContentDomain],
        locales: Iterable[LocaleCode],
    ) -> LoadSummary:
        """Eagerly load every (domain, locale) pair.

        Best-effort: failures are recorded and reported in the summary but
        never abort the batch.
        """
        locale_list = tuple(locales)
        results = [
            self._fetch(domain, locale)[0] for domain in domains for locale in locale_list
        ]
        summary = LoadSummary(results=tuple(results))
        logger.info("Preloaded content documents: %r", summary)
        return summary

    def get_stats(self) -> dict[str, int | float]:
        """Get cache statistics.

        Returns:
            Dict with keys:
            - size (int): Number of cached documents
            - hits (int): Lookups served from the cache
            - misses (int): Lookups that had to wait for a load
            - loads (int): Calls made to the document source
            - failures (int): Loads that failed
            - in_flight (int): Loads currently running
            - hit_rate (float): Hit rate as percentage (0.0-100.0)
        """
        with self._lock:
            total = self._hits + self._misses
            hit_rate = (self._hits / total * 100) if total > 0 else 0.0
            return {
                "size": len(self._documents),
                "hits": self._hits,
                "misses": self._misses,
                "loads": self._loads,
                "failures": self._failures,
                "in_flight": len(self._in_flight),
                "hit_rate": round(hit_rate, 2),
            }
