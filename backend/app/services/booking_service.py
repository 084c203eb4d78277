# backend/app/services/booking_service.py
"""
Booking Service for the booking service.

Handles all booking-related business logic:
- Creating bookings without overlaps for the same professional
- Deleting bookings
- Listing bookings with filters and pagination
- Serving cached daily availability

Create and delete decisions for one professional are serialized through the
professional lock registry. Every committed create or delete evicts the
availability cache entries for that professional on each date the booking
touches before returning, so the next availability read reflects the write.
"""

from __future__ import annotations

from datetime import date, datetime
import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from ..core.booking_lock import ProfessionalLockRegistry, get_lock_registry
from ..core.config import settings
from ..core.constants import MAX_ID_LENGTH, MAX_NOTES_LENGTH, MAX_SERVICE_TYPE_LENGTH
from ..core.exceptions import (
    BookingConflictException,
    BookingNotFoundException,
    ValidationException,
)
from ..core.schedule import ScheduleTemplate, day_window
from ..core.ulid_helper import is_valid_ulid
from ..domain.booking import AvailabilityResult, Booking, BookingPage, NewBooking
from ..repositories.booking_repository import BookingRepository
from ..repositories.factory import RepositoryFactory
from .availability import derive_availability
from .availability_cache import AvailabilityCache, get_availability_cache
from .base import BaseService
from .conflict_checker import ConflictChecker

logger = logging.getLogger(__name__)

CONFLICT_MESSAGE = "Time slot conflicts with existing booking"


def _require_text(field: str, value: Any, max_length: int) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationException(
            f"{field} is required", code="VALIDATION_ERROR", details={"field": field}
        )
    cleaned = value.strip()
    if len(cleaned) > max_length:
        raise ValidationException(
            f"{field} cannot exceed {max_length} characters",
            code="VALIDATION_ERROR",
            details={"field": field},
        )
    return cleaned


def _require_naive_datetime(field: str, value: Any) -> datetime:
    if not isinstance(value, datetime):
        raise ValidationException(
            f"{field} is required", code="VALIDATION_ERROR", details={"field": field}
        )
    if value.tzinfo is not None:
        raise ValidationException(
            f"{field} must be a local timestamp without a UTC offset",
            code="VALIDATION_ERROR",
            details={"field": field},
        )
    return value


def _optional_filter(value: Optional[str]) -> Optional[str]:
    """Trim a filter the way stored ids are trimmed; blank means no filter."""
    if value is None:
        return None
    return value.strip() or None


class BookingService(BaseService):
    """
    Service layer for booking operations.

    The database session is per request; the lock registry and the
    availability cache are shared by every instance in the process.
    """

    repository: BookingRepository

    def __init__(
        self,
        db: Session,
        lock_registry: Optional[ProfessionalLockRegistry] = None,
        availability_cache: Optional[AvailabilityCache] = None,
        template: Optional[ScheduleTemplate] = None,
        repository: Optional[BookingRepository] = None,
        conflict_checker: Optional[ConflictChecker] = None,
    ):
        """
        Initialize booking service.

        Args:
            db: Database session
            lock_registry: Per-professional lock registry (process-wide by default)
            availability_cache: Availability cache (process-wide by default)
            template: Daily schedule template (from settings by default)
            repository: Optional BookingRepository instance
            conflict_checker: Optional ConflictChecker instance
        """
        super().__init__(db)
        self.lock_registry = lock_registry or get_lock_registry()
        self.availability_cache = availability_cache or get_availability_cache()
        self.template = template or ScheduleTemplate.from_settings()
        self.repository = repository or RepositoryFactory.create_booking_repository(db)
        self.conflict_checker = conflict_checker or ConflictChecker(db, repository=self.repository)

    @BaseService.measure_operation("create_booking")
    def create_booking(
        self,
        client_id: str,
        professional_id: str,
        start_time: datetime,
        end_time: datetime,
        service_type: str,
        notes: Optional[str] = None,
    ) -> Booking:
        """
        Create a booking if it overlaps no existing booking of the professional.

        Args:
            client_id: Client making the booking
            professional_id: Professional being booked
            start_time: Start of the interval (inclusive)
            end_time: End of the interval (exclusive)
            service_type: Service label
            notes: Optional free text

        Returns:
            The persisted booking with its id and creation time

        Raises:
            ValidationException: If input is missing or malformed
            BookingConflictException: If the interval overlaps an existing booking
            RepositoryException: If the store fails
        """
        request = self._validate_new_booking(
            client_id, professional_id, start_time, end_time, service_type, notes
        )

        with self.lock_registry.hold(request.professional_id):
            conflicts = self.conflict_checker.find_conflicts(
                request.professional_id, request.start_time, request.end_time
            )
            if conflicts:
                raise BookingConflictException(
                    CONFLICT_MESSAGE,
                    details=self._build_conflict_details(request, conflicts),
                )

            with self.transaction():
                booking = self.repository.save(request)

            self._evict_availability(booking)

        self.logger.info(
            f"Booking {booking.id} created for professional {booking.professional_id} "
            f"{booking.start_time.isoformat()}-{booking.end_time.isoformat()}"
        )
        return booking

    @BaseService.measure_operation("delete_booking")
    def delete_booking(self, booking_id: str) -> None:
        """
        Delete a booking and evict its availability cache entries.

        Raises:
            BookingNotFoundException: If no booking has this id
            RepositoryException: If the store fails
        """
        if not is_valid_ulid(booking_id):
            raise BookingNotFoundException(booking_id)

        booking = self.repository.find_by_id(booking_id)
        if booking is None:
            raise BookingNotFoundException(booking_id)

        with self.lock_registry.hold(booking.professional_id):
            with self.transaction():
                deleted = self.repository.delete_by_id(booking_id)
            if not deleted:
                # Removed by a concurrent delete, which did its own eviction
                raise BookingNotFoundException(booking_id)

            self._evict_availability(booking)

        self.logger.info(
            f"Booking {booking_id} deleted for professional {booking.professional_id}"
        )

    @BaseService.measure_operation("list_bookings")
    def list_bookings(
        self,
        client_id: Optional[str] = None,
        professional_id: Optional[str] = None,
        booking_date: Optional[date] = None,
        page: int = 0,
        size: Optional[int] = None,
    ) -> BookingPage:
        """
        List bookings matching any combination of filters, ordered by start time.

        Args:
            client_id: Only bookings of this client
            professional_id: Only bookings of this professional
            booking_date: Only bookings starting on this date
            page: Zero-based page number
            size: Page size (settings default when omitted)

        Returns:
            One page of bookings with totals for the whole filtered set
        """
        size = settings.default_page_size if size is None else size
        if page < 0:
            raise ValidationException(
                "page must be zero or greater", code="VALIDATION_ERROR", details={"field": "page"}
            )
        if size < 1 or size > settings.max_page_size:
            raise ValidationException(
                f"size must be between 1 and {settings.max_page_size}",
                code="VALIDATION_ERROR",
                details={"field": "size"},
            )

        window_start: Optional[datetime] = None
        window_end: Optional[datetime] = None
        if booking_date is not None:
            window_start, window_end = day_window(booking_date)

        items, total = self.repository.find_filtered(
            client_id=_optional_filter(client_id),
            professional_id=_optional_filter(professional_id),
            window_start=window_start,
            window_end=window_end,
            page=page,
            size=size,
        )
        return BookingPage(items=items, total_elements=total, page=page, size=size)

    @BaseService.measure_operation("get_availability")
    def get_availability(self, professional_id: str, target_date: date) -> AvailabilityResult:
        """
        Free template slots of a professional on a date, served from cache when live.

        Raises:
            ValidationException: If professional_id is blank
        """
        professional_id = _require_text("professionalId", professional_id, MAX_ID_LENGTH)
        return self.availability_cache.get_or_load(
            professional_id,
            target_date,
            lambda: self._load_availability(professional_id, target_date),
        )

    def _load_availability(self, professional_id: str, target_date: date) -> AvailabilityResult:
        self.logger.debug(f"Cache miss for availability: {professional_id}, {target_date}")
        window_start, window_end = day_window(target_date)
        bookings = self.repository.find_by_professional_and_window(
            professional_id, window_start, window_end
        )
        slots = derive_availability(professional_id, target_date, bookings, self.template)
        return AvailabilityResult(
            professional_id=professional_id, date=target_date, available_slots=tuple(slots)
        )

    def _evict_availability(self, booking: Booking) -> None:
        for booking_date in booking.covered_dates:
            self.availability_cache.evict(booking.professional_id, booking_date)

    def _validate_new_booking(
        self,
        client_id: Any,
        professional_id: Any,
        start_time: Any,
        end_time: Any,
        service_type: Any,
        notes: Any,
    ) -> NewBooking:
        start = _require_naive_datetime("startTime", start_time)
        end = _require_naive_datetime("endTime", end_time)
        if start >= end:
            raise ValidationException(
                "startTime must be before endTime",
                code="VALIDATION_ERROR",
                details={"start_time": start.isoformat(), "end_time": end.isoformat()},
            )

        cleaned_notes: Optional[str] = None
        if notes is not None:
            if not isinstance(notes, str):
                raise ValidationException(
                    "notes must be text", code="VALIDATION_ERROR", details={"field": "notes"}
                )
            if len(notes) > MAX_NOTES_LENGTH:
                raise ValidationException(
                    f"notes cannot exceed {MAX_NOTES_LENGTH} characters",
                    code="VALIDATION_ERROR",
                    details={"field": "notes"},
                )
            cleaned_notes = notes.strip() or None

        return NewBooking(
            client_id=_require_text("clientId", client_id, MAX_ID_LENGTH),
            professional_id=_require_text("professionalId", professional_id, MAX_ID_LENGTH),
            start_time=start,
            end_time=end,
            service_type=_require_text("serviceType", service_type, MAX_SERVICE_TYPE_LENGTH),
            notes=cleaned_notes,
        )

    @staticmethod
    def _build_conflict_details(request: NewBooking, conflicts: list[Booking]) -> Dict[str, Any]:
        return {
            "professional_id": request.professional_id,
            "requested_start": request.start_time.isoformat(),
            "requested_end": request.end_time.isoformat(),
            "conflicting_booking_ids": [b.id for b in conflicts],
        }
