"""
Concurrency tests for per-professional booking serialization.

Each worker uses its own session and service instance, sharing the lock
registry and availability cache, the way concurrent requests do.
"""

from concurrent.futures import ThreadPoolExecutor
import threading
from typing import Callable, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import BookingConflictException
from app.repositories.booking_repository import BookingRepository
from app.services.booking_service import BookingService
from tests.factories.booking_builders import BOOKING_DAY, at

WORKERS = 8


def test_concurrent_overlapping_creates_exactly_one_succeeds(
    make_service: Callable[[], BookingService], db: Session
) -> None:
    services = [make_service() for _ in range(WORKERS)]
    barrier = threading.Barrier(WORKERS)

    def _worker(index: int) -> Optional[str]:
        barrier.wait(timeout=5)
        try:
            booking = services[index].create_booking(
                f"client-{index}", "pro-1", at(10, index), at(11, index), "Consultation"
            )
            return booking.id
        except BookingConflictException:
            return None

    with ThreadPoolExecutor(max_workers=WORKERS) as executor:
        results = list(executor.map(_worker, range(WORKERS)))

    winners = [r for r in results if r is not None]
    assert len(winners) == 1

    stored, total = BookingRepository(db).find_filtered(professional_id="pro-1")
    assert total == 1
    assert stored[0].id == winners[0]


def test_concurrent_disjoint_creates_all_succeed(
    make_service: Callable[[], BookingService], db: Session
) -> None:
    services = [make_service() for _ in range(WORKERS)]
    barrier = threading.Barrier(WORKERS)

    def _worker(index: int) -> str:
        barrier.wait(timeout=5)
        start = at(8 + index)
        return services[index].create_booking(
            f"client-{index}", "pro-1", start, at(9 + index), "Consultation"
        ).id

    with ThreadPoolExecutor(max_workers=WORKERS) as executor:
        ids = list(executor.map(_worker, range(WORKERS)))

    _, total = BookingRepository(db).find_filtered(professional_id="pro-1")
    assert total == WORKERS
    assert len(set(ids)) == WORKERS


def test_concurrent_creates_for_different_professionals_all_succeed(
    make_service: Callable[[], BookingService], db: Session
) -> None:
    services = [make_service() for _ in range(WORKERS)]
    barrier = threading.Barrier(WORKERS)

    def _worker(index: int) -> str:
        barrier.wait(timeout=5)
        return services[index].create_booking(
            "client-1", f"pro-{index}", at(10), at(11), "Consultation"
        ).professional_id

    with ThreadPoolExecutor(max_workers=WORKERS) as executor:
        professionals = list(executor.map(_worker, range(WORKERS)))

    assert sorted(professionals) == sorted(f"pro-{i}" for i in range(WORKERS))


def test_availability_after_concurrent_creates_reflects_every_write(
    make_service: Callable[[], BookingService],
) -> None:
    reader = make_service()
    assert len(reader.get_availability("pro-1", BOOKING_DAY).available_slots) == 8

    services = [make_service() for _ in range(4)]
    barrier = threading.Barrier(4)

    def _worker(index: int) -> None:
        barrier.wait(timeout=5)
        services[index].create_booking(
            f"client-{index}", "pro-1", at(9 + 2 * index), at(10 + 2 * index), "Consultation"
        )

    with ThreadPoolExecutor(max_workers=4) as executor:
        list(executor.map(_worker, range(4)))

    slots = reader.get_availability("pro-1", BOOKING_DAY).available_slots
    assert [s.start_time.hour for s in slots] == [10, 12, 14, 16]
