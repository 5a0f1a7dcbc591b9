# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Time-bounded response cache.

Maps request fingerprints to decoded responses so repeated identical
requests within the validity window are answered without a dispatch.
"""

import copy
import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict

from ..observability.collector import MetricsCollector
from ..observability.constants import CACHE_HITS_TOTAL, CACHE_MISSES_TOTAL
from .config import CacheConfig, validate_cache_validity

logger = logging.getLogger(__name__)


class _Miss:
    """Sentinel type returned by ResponseCache.lookup on a miss."""

    _instance: "_Miss | None" = None

    def __new__(cls) -> "_Miss":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISS"


MISS = _Miss()
"""Returned by lookup() when no fresh entry exists. Falsy."""


class CacheEntry(BaseModel):
    """
    A cached response.

    The payload is a private deep copy; it is copied again on every lookup
    so no caller ever holds a reference into the cache.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    fingerprint: str
    stored_at: float
    payload: Any

    def age(self, now: float) -> float:
        return now - self.stored_at

    def is_fresh(self, now: float, validity: float | None) -> bool:
        """True while ``now - stored_at < validity``; always True for None."""
        if validity is None:
            return True
        return self.age(now) < validity


@dataclass
class CacheMetrics:
    """Cache counters."""

    hits: int = 0
    misses: int = 0
    stores: int = 0
    clears: int = 0
    evictions: int = 0

    @property
    def hit_ratio(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0


class ResponseCache:
    """
    Response cache with a runtime-mutable validity window.

    Lookups, stores and clears are serialized through one lock, so a lookup
    never observes a partially cleared store and concurrent stores never
    lose updates.

    Disabling the cache suppresses lookups and stores but keeps existing
    entries; they become visible again once the cache is re-enabled (if
    still fresh).
    """

    def __init__(
        self,
        config: CacheConfig | None = None,
        metrics_collector: MetricsCollector | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        config = config or CacheConfig()
        self._enabled = config.enabled
        self._validity = config.validity
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._clock = clock
        self._metrics_collector = metrics_collector
        self.metrics = CacheMetrics()

        logger.debug(
            f"ResponseCache initialized (enabled={self._enabled}, validity={self._validity})"
        )

    # === Settings ===

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._enabled = bool(value)

    @property
    def validity(self) -> float | None:
        """Seconds an entry stays fresh, or None for never expire."""
        return self._validity

    @validity.setter
    def validity(self, value: float | None) -> None:
        self._validity = validate_cache_validity(value)

    # === Operations ===

    def lookup(self, fingerprint: str) -> Any:
        """
        Return a deep copy of the fresh payload stored under ``fingerprint``.

        Returns:
            The payload copy, or MISS if the cache is disabled or the entry
            is absent or expired
        """
        if not self._enabled:
            return MISS

        with self._lock:
            entry = self._entries.get(fingerprint)
            if entry is not None and entry.is_fresh(self._clock(), self._validity):
                self.metrics.hits += 1
                payload = copy.deepcopy(entry.payload)
                hit = True
            else:
                if entry is not None:
                    del self._entries[fingerprint]
                    self.metrics.evictions += 1
                self.metrics.misses += 1
                hit = False

        if self._metrics_collector:
            self._metrics_collector.inc_counter(
                CACHE_HITS_TOTAL if hit else CACHE_MISSES_TOTAL
            )
        if hit:
            logger.debug(f"Cache hit for {fingerprint}")
            return payload
        return MISS

    def store(self, fingerprint: str, payload: Any) -> bool:
        """
        Insert or overwrite the entry for ``fingerprint``.

        Returns:
            True if stored, False if the cache is disabled
        """
        if not self._enabled:
            return False

        entry = CacheEntry(
            fingerprint=fingerprint,
            stored_at=self._clock(),
            payload=copy.deepcopy(payload),
        )
        with self._lock:
            self._purge_locked(entry.stored_at)
            self._entries[fingerprint] = entry
            self.metrics.stores += 1
        return True

    def clear(self) -> int:
        """
        Remove every entry.

        Returns:
            Number of entries removed
        """
        with self._lock:
            removed = len(self._entries)
            self._entries = {}
            self.metrics.clears += 1
        logger.debug(f"Cache cleared ({removed} entries)")
        return removed

    def purge_expired(self) -> int:
        """Drop entries whose validity window has elapsed."""
        with self._lock:
            return self._purge_locked(self._clock())

    def _purge_locked(self, now: float) -> int:
        # Caller holds self._lock
        if self._validity is None:
            return 0
        expired = [
            key
            for key, entry in self._entries.items()
            if not entry.is_fresh(now, self._validity)
        ]
        for key in expired:
            del self._entries[key]
        self.metrics.evictions += len(expired)
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, fingerprint: object) -> bool:
        return fingerprint in self._entries

    def get_metrics(self) -> dict[str, Any]:
        return {
            "cache_enabled": self._enabled,
            "cache_validity": self._validity,
            "cache_entries": len(self._entries),
            "cache_hits": self.metrics.hits,
            "cache_misses": self.metrics.misses,
            "cache_evictions": self.metrics.evictions,
            "cache_hit_ratio": self.metrics.hit_ratio,
        }


__all__ = ["MISS", "CacheEntry", "CacheMetrics", "ResponseCache"]
