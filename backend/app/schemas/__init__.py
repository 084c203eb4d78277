# backend/app/schemas/__init__.py
"""
Pydantic schemas for the booking API.

Wire names are camelCase; Python attributes stay snake_case.
"""

from .booking import (
    AvailabilityResponse,
    AvailabilitySlotResponse,
    BookingListResponse,
    BookingResponse,
    CreateBookingRequest,
)
from .main_responses import RootResponse

__all__ = [
    "AvailabilityResponse",
    "AvailabilitySlotResponse",
    "BookingListResponse",
    "BookingResponse",
    "CreateBookingRequest",
    "RootResponse",
]
