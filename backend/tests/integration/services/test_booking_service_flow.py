"""
Integration tests for BookingService against SQLite.

Covers create/delete/list/availability together with the shared
availability cache.
"""

from datetime import date, timedelta
from unittest.mock import patch

import pytest
from sqlalchemy.orm import Session

from app.core.exceptions import BookingConflictException, BookingNotFoundException
from app.repositories.booking_repository import BookingRepository
from app.services.availability_cache import AvailabilityCache
from app.services.booking_service import BookingService
from tests.factories.booking_builders import BOOKING_DAY, at


NEXT_DAY = BOOKING_DAY + timedelta(days=1)


def _free_hours(
    service: BookingService, professional_id: str = "pro-1", day: date = BOOKING_DAY
) -> list[int]:
    result = service.get_availability(professional_id, day)
    return [slot.start_time.hour for slot in result.available_slots]


class TestCreate:
    def test_create_persists_booking(self, booking_service: BookingService, db: Session):
        booking = booking_service.create_booking(
            "client-1", "pro-1", at(10), at(11), "Consultation", "bring records"
        )

        stored = BookingRepository(db).find_by_id(booking.id)
        assert stored == booking
        assert stored.notes == "bring records"

    def test_overlapping_create_conflicts_and_changes_nothing(
        self, booking_service: BookingService, availability_cache: AvailabilityCache
    ):
        booking_service.create_booking("client-1", "pro-1", at(10), at(11), "Consultation")
        before = booking_service.get_availability("pro-1", BOOKING_DAY)

        with patch.object(availability_cache, "evict", wraps=availability_cache.evict) as evict:
            with pytest.raises(BookingConflictException):
                booking_service.create_booking(
                    "client-2", "pro-1", at(10, 30), at(11, 30), "Consultation"
                )
            evict.assert_not_called()

        assert booking_service.list_bookings(professional_id="pro-1").total_elements == 1
        assert booking_service.get_availability("pro-1", BOOKING_DAY) is before

    def test_back_to_back_bookings_are_accepted(self, booking_service: BookingService):
        booking_service.create_booking("client-1", "pro-1", at(10), at(11), "Consultation")
        booking_service.create_booking("client-2", "pro-1", at(11), at(12), "Consultation")
        booking_service.create_booking("client-3", "pro-1", at(9), at(10), "Consultation")

        assert booking_service.list_bookings(professional_id="pro-1").total_elements == 3

    def test_same_interval_for_other_professional_succeeds(self, booking_service: BookingService):
        booking_service.create_booking("client-1", "pro-1", at(10), at(11), "Consultation")

        other = booking_service.create_booking("client-1", "pro-2", at(10), at(11), "Consultation")

        assert other.professional_id == "pro-2"


class TestAvailabilityFreshness:
    def test_empty_day_has_eight_slots(self, booking_service: BookingService):
        assert _free_hours(booking_service) == [9, 10, 11, 12, 13, 14, 15, 16]

    def test_second_read_is_served_from_cache(self, booking_service: BookingService):
        first = booking_service.get_availability("pro-1", BOOKING_DAY)

        with patch.object(
            booking_service.repository, "find_by_professional_and_window"
        ) as query:
            second = booking_service.get_availability("pro-1", BOOKING_DAY)

        query.assert_not_called()
        assert second is first

    def test_create_is_visible_on_next_read(self, booking_service: BookingService):
        assert 10 in _free_hours(booking_service)

        booking_service.create_booking("client-1", "pro-1", at(10), at(11), "Consultation")

        assert _free_hours(booking_service) == [9, 11, 12, 13, 14, 15, 16]

    def test_delete_is_visible_on_next_read(self, booking_service: BookingService):
        booking = booking_service.create_booking(
            "client-1", "pro-1", at(13), at(15), "Consultation"
        )
        assert 13 not in _free_hours(booking_service)

        booking_service.delete_booking(booking.id)

        assert _free_hours(booking_service) == [9, 10, 11, 12, 13, 14, 15, 16]

    def test_write_for_other_professional_keeps_cached_entry(
        self, booking_service: BookingService, availability_cache: AvailabilityCache
    ):
        booking_service.get_availability("pro-1", BOOKING_DAY)

        booking_service.create_booking("client-1", "pro-2", at(10), at(11), "Consultation")

        assert ("pro-1", BOOKING_DAY) in availability_cache

    def test_overnight_booking_blocks_next_morning(self, booking_service: BookingService):
        assert 9 in _free_hours(booking_service, day=NEXT_DAY)

        booking = booking_service.create_booking(
            "client-1", "pro-1", at(22), at(12, day=NEXT_DAY), "Night shift"
        )

        assert _free_hours(booking_service, day=NEXT_DAY) == [12, 13, 14, 15, 16]
        with pytest.raises(BookingConflictException):
            booking_service.create_booking(
                "client-2", "pro-1", at(9, day=NEXT_DAY), at(10, day=NEXT_DAY), "Consultation"
            )

        booking_service.delete_booking(booking.id)

        assert _free_hours(booking_service, day=NEXT_DAY) == [9, 10, 11, 12, 13, 14, 15, 16]

    def test_booking_ending_at_midnight_leaves_next_day_cached(
        self, booking_service: BookingService, availability_cache: AvailabilityCache
    ):
        booking_service.get_availability("pro-1", NEXT_DAY)

        booking_service.create_booking(
            "client-1", "pro-1", at(22), at(0, day=NEXT_DAY), "Night shift"
        )

        assert ("pro-1", NEXT_DAY) in availability_cache

    def test_cached_slots_cannot_be_changed_by_a_caller(self, booking_service: BookingService):
        first = booking_service.get_availability("pro-1", BOOKING_DAY)

        with pytest.raises(AttributeError):
            first.available_slots.clear()

        assert len(booking_service.get_availability("pro-1", BOOKING_DAY).available_slots) == 8


class TestDelete:
    def test_delete_unknown_id_raises_and_evicts_nothing(
        self, booking_service: BookingService, availability_cache: AvailabilityCache
    ):
        booking_service.get_availability("pro-1", BOOKING_DAY)

        with pytest.raises(BookingNotFoundException):
            booking_service.delete_booking("01J0000000000000000000000A")

        assert ("pro-1", BOOKING_DAY) in availability_cache

    def test_delete_twice(self, booking_service: BookingService):
        booking = booking_service.create_booking(
            "client-1", "pro-1", at(10), at(11), "Consultation"
        )
        booking_service.delete_booking(booking.id)

        with pytest.raises(BookingNotFoundException):
            booking_service.delete_booking(booking.id)

    def test_deleted_interval_can_be_rebooked(self, booking_service: BookingService):
        booking = booking_service.create_booking(
            "client-1", "pro-1", at(10), at(11), "Consultation"
        )
        booking_service.delete_booking(booking.id)

        rebooked = booking_service.create_booking(
            "client-2", "pro-1", at(10), at(11), "Consultation"
        )

        assert rebooked.id != booking.id


class TestList:
    def test_list_pages_ordered_by_start(self, booking_service: BookingService):
        for hour in (15, 9, 12, 10, 16):
            booking_service.create_booking("client-1", "pro-1", at(hour), at(hour + 1), "Checkup")

        page = booking_service.list_bookings(client_id="client-1", page=1, size=2)

        assert [b.start_time.hour for b in page.items] == [12, 15]
        assert page.total_elements == 5
        assert page.total_pages == 3
        assert page.page == 1
        assert page.size == 2
