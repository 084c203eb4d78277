"""
Per-professional booking locks.

Every create/delete decision for a professional runs inside that
professional's exclusive section, so a conflict check and the write that
follows it are never interleaved with another decision for the same
professional. Different professionals use different locks and proceed in
parallel.

Locks are created on first use and never removed: the registry grows with
the number of distinct professional ids seen by the process.
"""

from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache
import logging
import threading
import time
from typing import Dict, Iterator

from app.monitoring.prometheus_metrics import prometheus_metrics

logger = logging.getLogger(__name__)


class ProfessionalLockRegistry:
    """Concurrency-safe map from professional id to an exclusive lock."""

    def __init__(self) -> None:
        self._locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    def lock_for(self, professional_id: str) -> threading.Lock:
        lock = self._locks.get(professional_id)
        if lock is not None:
            return lock
        with self._guard:
            lock = self._locks.get(professional_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[professional_id] = lock
                prometheus_metrics.record_booking_lock("create")
            return lock

    @contextmanager
    def hold(self, professional_id: str) -> Iterator[None]:
        """Block until the professional's section is free, then hold it."""
        lock = self.lock_for(professional_id)
        started = time.monotonic()
        lock.acquire()
        waited = time.monotonic() - started
        prometheus_metrics.record_booking_lock("acquire", wait_seconds=waited)
        if waited > 1.0:
            logger.warning(
                "professional_lock_slow_acquire",
                extra={"professional_id": professional_id, "wait_seconds": round(waited, 3)},
            )
        try:
            yield
        finally:
            lock.release()
            prometheus_metrics.record_booking_lock("release")


@lru_cache(maxsize=1)
def get_lock_registry() -> ProfessionalLockRegistry:
    """Process-wide lock registry shared by every request."""
    return ProfessionalLockRegistry()
