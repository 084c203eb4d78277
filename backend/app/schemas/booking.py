# backend/app/schemas/booking.py
"""
Booking schemas for the booking service.

Wire names are camelCase. Timestamps are local (no UTC offset) and use the
``yyyy-MM-ddTHH:mm:ss`` format on input and output.
"""

from typing import List, Optional

from pydantic import Field, field_validator

from ..core.constants import MAX_NOTES_LENGTH
from ..domain.booking import AvailabilityResult, Booking, BookingPage
from ._strict_base import StrictModel, StrictRequestModel
from .base import LocalDate, LocalDateTime, parse_local_datetime


class CreateBookingRequest(StrictRequestModel):
    """
    Request body for creating a booking.

    Blank identifiers and inverted intervals are left to the service, which
    reports them as validation errors before touching any lock or storage.
    """

    client_id: str = Field(..., description="Client making the booking")
    professional_id: str = Field(..., description="Professional being booked")
    start_time: LocalDateTime = Field(..., description="Start of the booking (inclusive)")
    end_time: LocalDateTime = Field(..., description="End of the booking (exclusive)")
    service_type: str = Field(..., description="Kind of service booked")
    notes: Optional[str] = Field(None, max_length=MAX_NOTES_LENGTH, description="Free text")

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def validate_timestamp_format(cls, v: object) -> object:
        return parse_local_datetime(v)


class BookingResponse(StrictModel):
    """A persisted booking."""

    id: str
    client_id: str
    professional_id: str
    start_time: LocalDateTime
    end_time: LocalDateTime
    service_type: str
    notes: Optional[str] = None
    created_at: LocalDateTime

    @classmethod
    def from_booking(cls, booking: Booking) -> "BookingResponse":
        return cls(
            id=booking.id,
            client_id=booking.client_id,
            professional_id=booking.professional_id,
            start_time=booking.start_time,
            end_time=booking.end_time,
            service_type=booking.service_type,
            notes=booking.notes,
            created_at=booking.created_at,
        )


class BookingListResponse(StrictModel):
    """One page of bookings with totals for the whole filtered set."""

    bookings: List[BookingResponse]
    total_elements: int
    total_pages: int
    current_page: int
    page_size: int

    @classmethod
    def from_page(cls, page: BookingPage) -> "BookingListResponse":
        return cls(
            bookings=[BookingResponse.from_booking(b) for b in page.items],
            total_elements=page.total_elements,
            total_pages=page.total_pages,
            current_page=page.page,
            page_size=page.size,
        )


class AvailabilitySlotResponse(StrictModel):
    start_time: LocalDateTime
    end_time: LocalDateTime


class AvailabilityResponse(StrictModel):
    """Free slots of one professional on one date."""

    professional_id: str
    date: LocalDate
    available_slots: List[AvailabilitySlotResponse]

    @classmethod
    def from_result(cls, result: AvailabilityResult) -> "AvailabilityResponse":
        return cls(
            professional_id=result.professional_id,
            date=result.date,
            available_slots=[
                AvailabilitySlotResponse(start_time=s.start_time, end_time=s.end_time)
                for s in result.available_slots
            ],
        )
