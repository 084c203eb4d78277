# backend/app/services/availability_cache.py
"""
In-process availability cache.

Memoizes availability results per (professional, date) with:
- a bounded population, evicting the least recently used entry first
- a fixed time-to-live from the moment an entry is stored
- explicit eviction, called by the booking service after every committed
  create or delete for that professional and date

A load that started before an eviction of the same key is returned to its
caller but never stored, so an eviction cannot be undone by a slow reader.
Concurrent misses on one key may each run the loader.
"""

from collections import OrderedDict
from datetime import date
from functools import lru_cache
import logging
import threading
from time import monotonic
from typing import Callable, Dict, Optional, Tuple

from ..core.config import settings
from ..domain.booking import AvailabilityResult
from ..monitoring.prometheus_metrics import prometheus_metrics

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, date]


class AvailabilityCache:
    """Thread-safe LRU + TTL cache of availability results."""

    def __init__(
        self,
        max_entries: int = 100,
        ttl_seconds: float = 600.0,
        clock: Callable[[], float] = monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: "OrderedDict[CacheKey, Tuple[float, AvailabilityResult]]" = OrderedDict()
        self._lock = threading.Lock()

        # Eviction fencing for in-flight loads
        self._epoch = 0
        self._loading: Dict[CacheKey, int] = {}
        self._evicted_at: Dict[CacheKey, int] = {}

        self._stats: Dict[str, int] = {
            "hits": 0,
            "misses": 0,
            "expired": 0,
            "evictions": 0,
            "lru_evictions": 0,
            "stale_populates": 0,
        }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def get(self, professional_id: str, target_date: date) -> Optional[AvailabilityResult]:
        """Live entry for the key, or None. A hit marks the entry most recently used."""
        key = (professional_id, target_date)
        with self._lock:
            return self._get_locked(key)

    def get_or_load(
        self,
        professional_id: str,
        target_date: date,
        loader: Callable[[], AvailabilityResult],
    ) -> AvailabilityResult:
        """
        Return the cached result, or run ``loader`` and cache what it returns.

        The loader runs outside the cache lock.
        """
        key = (professional_id, target_date)
        with self._lock:
            cached = self._get_locked(key)
            if cached is not None:
                return cached
            self._loading[key] = self._loading.get(key, 0) + 1
            token = self._epoch

        stored = False
        try:
            value = loader()
            with self._lock:
                stored = self._store_locked(key, value, token)
        finally:
            with self._lock:
                remaining = self._loading.get(key, 1) - 1
                if remaining <= 0:
                    self._loading.pop(key, None)
                    self._evicted_at.pop(key, None)
                else:
                    self._loading[key] = remaining

        if not stored:
            logger.debug(
                f"Discarded availability for {professional_id} on {target_date}: "
                "evicted while loading"
            )
        return value

    def evict(self, professional_id: str, target_date: date) -> bool:
        """
        Drop the entry for the key and fence any load already in flight.

        Returns:
            True if an entry was present
        """
        key = (professional_id, target_date)
        with self._lock:
            self._epoch += 1
            if key in self._loading:
                self._evicted_at[key] = self._epoch
            removed = self._entries.pop(key, None) is not None
            self._stats["evictions"] += 1

        prometheus_metrics.record_cache_event("evict")
        logger.debug(f"Evicted availability cache for {professional_id} on {target_date}")
        return removed

    def clear(self) -> None:
        with self._lock:
            self._epoch += 1
            for key in self._loading:
                self._evicted_at[key] = self._epoch
            self._entries.clear()

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {**self._stats, "size": len(self._entries)}

    def _get_locked(self, key: CacheKey) -> Optional[AvailabilityResult]:
        entry = self._entries.get(key)
        if entry is None:
            self._stats["misses"] += 1
            prometheus_metrics.record_cache_event("miss")
            return None

        stored_at, value = entry
        if self._clock() - stored_at >= self.ttl_seconds:
            del self._entries[key]
            self._stats["expired"] += 1
            self._stats["misses"] += 1
            prometheus_metrics.record_cache_event("expired")
            return None

        self._entries.move_to_end(key)
        self._stats["hits"] += 1
        prometheus_metrics.record_cache_event("hit")
        return value

    def _store_locked(self, key: CacheKey, value: AvailabilityResult, token: int) -> bool:
        if self._evicted_at.get(key, -1) > token:
            self._stats["stale_populates"] += 1
            prometheus_metrics.record_cache_event("stale_populate")
            return False

        self._entries[key] = (self._clock(), value)
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)
            self._stats["lru_evictions"] += 1
            prometheus_metrics.record_cache_event("lru_evict")
        return True


@lru_cache(maxsize=1)
def get_availability_cache() -> AvailabilityCache:
    """Process-wide availability cache configured from settings."""
    return AvailabilityCache(
        max_entries=settings.availability_cache_max_entries,
        ttl_seconds=settings.availability_cache_ttl_seconds,
    )
