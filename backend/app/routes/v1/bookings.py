# backend/app/routes/v1/bookings.py
"""
Booking routes - API v1

Mounted at /bookings and at /api/v1/bookings.
All business logic delegated to BookingService.

Endpoints:
    POST / - Create a booking
    GET / - List bookings with filters and pagination
    GET /availability - Free slots of a professional on a date
    DELETE /{booking_id} - Delete a booking
"""

import asyncio
from datetime import date
import logging
from typing import NoReturn, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response, status

from ...api.dependencies import get_booking_service
from ...core.config import settings
from ...core.exceptions import GENERIC_ERROR_MESSAGE, DomainException
from ...schemas.booking import (
    AvailabilityResponse,
    BookingListResponse,
    BookingResponse,
    CreateBookingRequest,
)
from ...services.booking_service import BookingService

logger = logging.getLogger(__name__)

# No prefix here, added when mounting in main.py
router = APIRouter(tags=["bookings-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=GENERIC_ERROR_MESSAGE
    )


# ============================================================================
# SECTION 1: Static routes (no path parameters)
# ============================================================================


@router.post(
    "",
    response_model=BookingResponse,
    response_model_by_alias=True,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid booking request"},
        409: {"description": "Time slot conflicts with existing booking"},
    },
)
async def create_booking(
    booking_data: CreateBookingRequest = Body(...),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    """Create a booking if the professional is free for the whole interval."""
    try:
        booking = await asyncio.to_thread(
            booking_service.create_booking,
            booking_data.client_id,
            booking_data.professional_id,
            booking_data.start_time,
            booking_data.end_time,
            booking_data.service_type,
            booking_data.notes,
        )
        return BookingResponse.from_booking(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("", response_model=BookingListResponse, response_model_by_alias=True)
async def list_bookings(
    client_id: Optional[str] = Query(None, alias="clientId"),
    professional_id: Optional[str] = Query(None, alias="professionalId"),
    booking_date: Optional[date] = Query(None, alias="date", description="yyyy-MM-dd"),
    page: int = Query(0, ge=0, description="Zero-based page number"),
    size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingListResponse:
    """
    List bookings ordered by start time.

    Filters combine with AND; any of them may be omitted.
    """
    try:
        result = await asyncio.to_thread(
            booking_service.list_bookings,
            client_id=client_id,
            professional_id=professional_id,
            booking_date=booking_date,
            page=page,
            size=size,
        )
        return BookingListResponse.from_page(result)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/availability", response_model=AvailabilityResponse, response_model_by_alias=True)
async def get_availability(
    professional_id: str = Query(..., alias="professionalId"),
    target_date: date = Query(..., alias="date", description="yyyy-MM-dd"),
    booking_service: BookingService = Depends(get_booking_service),
) -> AvailabilityResponse:
    """Free template slots for a professional on a date."""
    try:
        result = await asyncio.to_thread(
            booking_service.get_availability, professional_id, target_date
        )
        return AvailabilityResponse.from_result(result)
    except DomainException as e:
        handle_domain_exception(e)


# ============================================================================
# SECTION 2: Dynamic routes (with path parameters)
# ============================================================================


@router.delete(
    "/{booking_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={404: {"description": "Booking not found"}},
)
async def delete_booking(
    booking_id: str,
    booking_service: BookingService = Depends(get_booking_service),
) -> Response:
    """Delete a booking."""
    try:
        await asyncio.to_thread(booking_service.delete_booking, booking_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except DomainException as e:
        handle_domain_exception(e)
