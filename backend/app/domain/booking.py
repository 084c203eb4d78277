"""
Plain booking records shared by the repository, services and routes.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
import math
from typing import List, Optional, Tuple


def intervals_overlap(
    a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime
) -> bool:
    """True if [a_start, a_end) overlaps [b_start, b_end). Touching ends do not overlap."""
    return a_start < b_end and b_start < a_end


@dataclass(frozen=True)
class NewBooking:
    """A validated booking request that has not been persisted yet."""

    client_id: str
    professional_id: str
    start_time: datetime
    end_time: datetime
    service_type: str
    notes: Optional[str] = None


@dataclass(frozen=True)
class Booking:
    """An accepted booking. Identity and creation time are assigned by the store."""

    id: str
    client_id: str
    professional_id: str
    start_time: datetime
    end_time: datetime
    service_type: str
    notes: Optional[str]
    created_at: datetime

    @property
    def booking_date(self) -> date:
        return self.start_time.date()

    @property
    def covered_dates(self) -> List[date]:
        """Every calendar date the half-open interval touches, in order."""
        last = (self.end_time - timedelta(microseconds=1)).date()
        day = self.start_time.date()
        dates: List[date] = []
        while day <= last:
            dates.append(day)
            day += timedelta(days=1)
        return dates

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return intervals_overlap(self.start_time, self.end_time, start, end)


@dataclass(frozen=True)
class AvailabilitySlot:
    start_time: datetime
    end_time: datetime


@dataclass(frozen=True)
class AvailabilityResult:
    professional_id: str
    date: date
    available_slots: Tuple[AvailabilitySlot, ...] = ()

    def __post_init__(self) -> None:
        # Cached results are shared between callers
        object.__setattr__(self, "available_slots", tuple(self.available_slots))


@dataclass(frozen=True)
class BookingPage:
    """One page of bookings plus the totals of the whole filtered set."""

    items: List[Booking]
    total_elements: int
    page: int
    size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_elements / self.size) if self.size else 0
