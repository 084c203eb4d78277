# backend/app/repositories/booking_repository.py
"""
Booking Repository for the booking service.

The storage contract the booking core depends on: persisting new bookings,
lookups by id, deletion, and the interval queries used for conflict
detection, availability and listing.

Every method returns immutable ``Booking`` records, never ORM rows, so
services cannot mutate stored bookings by accident.
"""

from datetime import datetime
import logging
from typing import Callable, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..core.ulid_helper import generate_ulid
from ..domain.booking import Booking, NewBooking
from ..models.booking import BookingModel
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


def _to_record(row: BookingModel) -> Booking:
    return Booking(
        id=row.id,
        client_id=row.client_id,
        professional_id=row.professional_id,
        start_time=row.start_time,
        end_time=row.end_time,
        service_type=row.service_type,
        notes=row.notes,
        created_at=row.created_at,
    )


class BookingRepository(BaseRepository[BookingModel]):
    """Booking store backed by a SQLAlchemy session."""

    def __init__(self, db: Session, clock: Callable[[], datetime] = datetime.now):
        super().__init__(db, BookingModel)
        self._clock = clock

    def save(self, booking: NewBooking) -> Booking:
        """
        Persist a new booking.

        Assigns the booking id and creation timestamp. Flushes but does not
        commit; the calling service owns the transaction.
        """
        row = BookingModel(
            id=generate_ulid(),
            client_id=booking.client_id,
            professional_id=booking.professional_id,
            start_time=booking.start_time,
            end_time=booking.end_time,
            service_type=booking.service_type,
            notes=booking.notes,
            created_at=self._clock().replace(microsecond=0),
        )
        self.add(row)
        return _to_record(row)

    def find_by_id(self, booking_id: str) -> Optional[Booking]:
        row = self.get_by_id(booking_id)
        return _to_record(row) if row is not None else None

    def delete_by_id(self, booking_id: str) -> bool:
        return self.delete(booking_id)

    def find_overlapping(
        self, professional_id: str, start: datetime, end: datetime
    ) -> List[Booking]:
        """
        Bookings of a professional whose interval overlaps [start, end).

        Two half-open intervals overlap iff each starts before the other ends.
        """
        query = (
            self._build_query()
            .filter(
                BookingModel.professional_id == professional_id,
                BookingModel.start_time < end,
                BookingModel.end_time > start,
            )
            .order_by(BookingModel.start_time)
        )
        return [_to_record(row) for row in self._execute_query(query)]

    def find_by_professional_and_window(
        self, professional_id: str, window_start: datetime, window_end: datetime
    ) -> List[Booking]:
        """
        Bookings of a professional occupying any part of [window_start, window_end).

        Includes bookings that start before the window and run into it, such
        as an overnight booking read from the following day's window.
        """
        return self.find_overlapping(professional_id, window_start, window_end)

    def find_filtered(
        self,
        *,
        client_id: Optional[str] = None,
        professional_id: Optional[str] = None,
        window_start: Optional[datetime] = None,
        window_end: Optional[datetime] = None,
        page: int = 0,
        size: int = 20,
    ) -> Tuple[List[Booking], int]:
        """
        One page of bookings matching any combination of filters.

        Results are sorted by start time ascending (id breaks ties). The page
        and the total count are read in the same transaction.

        Returns:
            (bookings on the requested page, total matching bookings)
        """
        filters = []
        if client_id is not None:
            filters.append(BookingModel.client_id == client_id)
        if professional_id is not None:
            filters.append(BookingModel.professional_id == professional_id)
        if window_start is not None:
            filters.append(BookingModel.start_time >= window_start)
        if window_end is not None:
            filters.append(BookingModel.start_time < window_end)

        # The window count rides on the page query so items and total come
        # from the same statement.
        query = (
            self.db.query(BookingModel, func.count().over().label("total"))
            .filter(*filters)
            .order_by(BookingModel.start_time, BookingModel.id)
            .offset(page * size)
            .limit(size)
        )
        try:
            results = query.all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing bookings: {str(e)}")
            raise RepositoryException(f"Failed to list bookings: {str(e)}")

        if results:
            return [_to_record(row) for row, _ in results], int(results[0].total)

        # Page past the end: no rows to carry the count
        total = self._execute_scalar(self.db.query(func.count(BookingModel.id)).filter(*filters))
        return [], int(total or 0)
