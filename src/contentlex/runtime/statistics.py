"""Error and fallback statistics for content resolution health monitoring.

StatisticsMonitor is constructed once per engine and shared by reference
with every component that can observe an error or a fallback. Components
only call the record_* methods; nothing reads the counters except
monitoring code through get_statistics().

Thread Safety:
    All counters are guarded by a single lock, so increments are never
    lost. get_statistics() returns a snapshot taken under the lock.

Python 3.13+.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from contentlex.constants import DEFAULT_ERROR_RATE_THRESHOLD, MAX_ERROR_KEYS
from contentlex.enums import ErrorKind, FallbackTier

if TYPE_CHECKING:
    from collections.abc import Mapping

    from contentlex.localization.types import ContentKey, LocaleCode

__all__ = ["ErrorStatistics", "FallbackEvent", "StatisticsMonitor"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FallbackEvent:
    """A single non-primary resolution.

    Passed to the on_fallback callback of StatisticsMonitor.

    Attributes:
        tier: Tier that satisfied the request
        key: Content key
        locale: Requested locale code
    """

    tier: FallbackTier
    key: ContentKey
    locale: LocaleCode | None


@dataclass(frozen=True, slots=True)
class ErrorStatistics:
    """Immutable snapshot of the statistics counters.

    Attributes:
        total_errors: Errors recorded since the last reset
        fallbacks_used: Non-primary resolutions since the last reset
        errors_by_kind: ErrorKind value -> count
        errors_by_key: Content key -> count
        fallbacks_by_tier: FallbackTier value -> count
    """

    total_errors: int = 0
    fallbacks_used: int = 0
    errors_by_kind: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))
    errors_by_key: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))
    fallbacks_by_tier: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def error_rate(self) -> float:
        """Fallbacks per recorded error; 0.0 when no error was recorded."""
        if self.total_errors == 0:
            return 0.0
        return self.fallbacks_used / self.total_errors

    def to_dict(self) -> dict[str, object]:
        """Render with the camelCase keys consumed by host dashboards."""
        return {
            "totalErrors": self.total_errors,
            "fallbacksUsed": self.fallbacks_used,
            "errorsByKind": dict(self.errors_by_kind),
            "errorsByKey": dict(self.errors_by_key),
            "errorRate": self.error_rate,
        }


class StatisticsMonitor:
    """Process-lifetime error and fallback counters.

    Counters accumulate until reset() is called explicitly (test
    isolation and diagnostics only).

    Example:
        >>> monitor = StatisticsMonitor()
        >>> monitor.record_error(ErrorKind.KEY_MISSING, key="the_fool", locale="es")
        >>> monitor.get_statistics().total_errors
        1
    """

    __slots__ = (
        "_errors_by_key",
        "_errors_by_kind",
        "_fallbacks_by_tier",
        "_fallbacks_used",
        "_lock",
        "_on_fallback",
        "_total_errors",
    )

    def __init__(self, on_fallback: Callable[[FallbackEvent], None] | None = None) -> None:
        """Initialize monitor.

        Args:
            on_fallback: Optional callback invoked for every recorded fallback,
                outside the internal lock.
        """
        self._lock = threading.Lock()
        self._on_fallback = on_fallback
        self._total_errors = 0
        self._fallbacks_used = 0
        self._errors_by_kind: dict[str, int] = {}
        self._errors_by_key: dict[str, int] = {}
        self._fallbacks_by_tier: dict[str, int] = {}

    def record_error(
        self,
        kind: ErrorKind,
        key: ContentKey | None = None,
        locale: LocaleCode | None = None,
        error: BaseException | str | None = None,
    ) -> None:
        """Record one error occurrence and log it.

        Args:
            kind: Error category
            key: Content key (or document path) involved, if any
            locale: Locale code involved, if any
            error: Underlying exception or description, for the log line
        """
        with self._lock:
            self._total_errors += 1
            self._errors_by_kind[str(kind)] = self._errors_by_kind.get(str(kind), 0) + 1
            if key is not None and (
                key in self._errors_by_key or len(self._errors_by_key) < MAX_ERROR_KEYS
            ):
                self._errors_by_key[key] = self._errors_by_key.get(key, 0) + 1

        logger.warning(
            "Content error %s [key=%s] [locale=%s]%s",
            kind,
            key,
            locale,
            f" [error={error}]" if error is not None else "",
        )

    def record_fallback_used(
        self,
        tier: FallbackTier,
        key: ContentKey,
        locale: LocaleCode | None,
    ) -> None:
        """Record that a non-primary tier satisfied a request."""
        with self._lock:
            self._fallbacks_used += 1
            self._fallbacks_by_tier[str(tier)] = self._fallbacks_by_tier.get(str(tier), 0) + 1

        logger.debug("Fallback %s used for key '%s' (%s)", tier, key, locale)

        if self._on_fallback is not None:
            self._on_fallback(FallbackEvent(tier=tier, key=key, locale=locale))

    def get_statistics(self) -> ErrorStatistics:
        """Snapshot all counters."""
        with self._lock:
            return ErrorStatistics(
                total_errors=self._total_errors,
                fallbacks_used=self._fallbacks_used,
                errors_by_kind=MappingProxyType(dict(self._errors_by_kind)),
                errors_by_key=MappingProxyType(dict(self._errors_by_key)),
                fallbacks_by_tier=MappingProxyType(dict(self._fallbacks_by_tier)),
            )

    def reset(self) -> None:
        """Zero all counters."""
        with self._lock:
            self._total_errors = 0
            self._fallbacks_used = 0
            self._errors_by_kind.clear()
            self._errors_by_key.clear()
            self._fallbacks_by_tier.clear()
        logger.debug("Content statistics reset")

    @property
    def error_rate(self) -> float:
        """Current fallbacks-per-error ratio (0.0 with no errors)."""
        with self._lock:
            if self._total_errors == 0:
                return 0.0
            return self._fallbacks_used / self._total_errors

    def is_error_rate_high(self, threshold: float = DEFAULT_ERROR_RATE_THRESHOLD) -> bool:
        """Check the error rate against a threshold.

        Always False while no error has been recorded, regardless of threshold.
        """
        with self._lock:
            if self._total_errors == 0:
                return False
            return (self._fallbacks_used / self._total_errors) > threshold
