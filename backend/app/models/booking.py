"""
Booking table for the booking service.

Rows are written once and never updated: a booking is created through the
conflict-checked path and removed only by explicit deletion. Services work
with the immutable ``app.domain.booking.Booking`` record; this model is the
storage shape only.
"""

from sqlalchemy import CheckConstraint, Column, DateTime, Index, String, Text

from ..core.ulid_helper import generate_ulid
from ..database import Base


class BookingModel(Base):
    """Persisted booking row."""

    __tablename__ = "bookings"

    id = Column(String(26), primary_key=True, default=generate_ulid)

    client_id = Column(String(64), nullable=False)
    professional_id = Column(String(64), nullable=False)

    # Naive local timestamps, half-open [start_time, end_time)
    start_time = Column(DateTime(timezone=False), nullable=False)
    end_time = Column(DateTime(timezone=False), nullable=False)

    service_type = Column(String(100), nullable=False)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=False), nullable=False)

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="check_time_order"),
        Index("ix_bookings_professional_start", "professional_id", "start_time"),
        Index("ix_bookings_client_start", "client_id", "start_time"),
        Index("ix_bookings_start", "start_time"),
    )

    def __repr__(self) -> str:
        return (
            f"<BookingModel {self.id} professional={self.professional_id} "
            f"{self.start_time}-{self.end_time}>"
        )
