# backend/app/services/conflict_checker.py
"""
Conflict Checker Service for the booking service.

Decides whether a candidate interval collides with an existing booking of
the same professional. It performs no locking: callers run it inside the
professional's lock so the answer stays true until their write commits.
"""

from datetime import datetime
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..domain.booking import Booking
from ..repositories import RepositoryFactory
from ..repositories.booking_repository import BookingRepository
from .base import BaseService

logger = logging.getLogger(__name__)


class ConflictChecker(BaseService):
    """
    Service for checking booking conflicts.

    Two half-open intervals [s1, e1) and [s2, e2) conflict iff
    s1 < e2 and s2 < e1, so back-to-back bookings are allowed.
    """

    def __init__(self, db: Session, repository: Optional[BookingRepository] = None):
        """
        Initialize conflict checker service.

        Args:
            db: Database session
            repository: Optional BookingRepository instance
        """
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_booking_repository(db)

    @BaseService.measure_operation("find_conflicts")
    def find_conflicts(
        self, professional_id: str, start: datetime, end: datetime
    ) -> List[Booking]:
        """
        Bookings of ``professional_id`` overlapping [start, end).

        Args:
            professional_id: The professional to check
            start: Candidate start (inclusive)
            end: Candidate end (exclusive)

        Returns:
            Overlapping bookings ordered by start time
        """
        conflicts = self.repository.find_overlapping(professional_id, start, end)

        if conflicts:
            self.logger.warning(
                f"Found {len(conflicts)} booking conflicts for {professional_id} "
                f"between {start.isoformat()}-{end.isoformat()}"
            )

        return conflicts

    def has_conflict(self, professional_id: str, start: datetime, end: datetime) -> bool:
        """True if any booking of the professional overlaps [start, end)."""
        return len(self.find_conflicts(professional_id, start, end)) > 0
