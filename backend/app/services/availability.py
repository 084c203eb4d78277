"""
Availability derivation.

Turns the daily schedule template and a professional's bookings into the
list of free slots for one date. Pure: the same bookings and date always
produce the same slots, which is what makes the result safe to cache.
"""

from datetime import date
from typing import Iterable, List

from ..core.schedule import ScheduleTemplate
from ..domain.booking import AvailabilitySlot, Booking, intervals_overlap


def derive_availability(
    professional_id: str,
    target_date: date,
    existing_bookings: Iterable[Booking],
    template: ScheduleTemplate,
) -> List[AvailabilitySlot]:
    """
    Template slots of ``target_date`` that no booking overlaps, in order.

    Bookings of other professionals are ignored. Slots in the past are not
    filtered out.
    """
    bookings = [b for b in existing_bookings if b.professional_id == professional_id]

    available: List[AvailabilitySlot] = []
    for slot_start, slot_end in template.slots_for(target_date):
        if not any(
            intervals_overlap(b.start_time, b.end_time, slot_start, slot_end) for b in bookings
        ):
            available.append(AvailabilitySlot(start_time=slot_start, end_time=slot_end))
    return available
