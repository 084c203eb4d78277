# backend/app/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

This module provides factory functions that create service instances
with their required dependencies properly injected. Sessions are per
request; the lock registry and availability cache are process singletons.
"""

import logging

from fastapi import Depends
from sqlalchemy.orm import Session

from ...core.booking_lock import ProfessionalLockRegistry, get_lock_registry
from ...core.schedule import ScheduleTemplate
from ...services.availability_cache import AvailabilityCache, get_availability_cache
from ...services.booking_service import BookingService
from .database import get_db

logger = logging.getLogger(__name__)


def get_lock_registry_dep() -> ProfessionalLockRegistry:
    """Get the process-wide professional lock registry."""
    return get_lock_registry()


def get_availability_cache_dep() -> AvailabilityCache:
    """Get the process-wide availability cache."""
    return get_availability_cache()


def get_booking_service(
    db: Session = Depends(get_db),
    lock_registry: ProfessionalLockRegistry = Depends(get_lock_registry_dep),
    availability_cache: AvailabilityCache = Depends(get_availability_cache_dep),
) -> BookingService:
    """
    Get booking service instance with all dependencies.

    Args:
        db: Database session
        lock_registry: Shared per-professional lock registry
        availability_cache: Shared availability cache

    Returns:
        BookingService instance
    """
    return BookingService(
        db,
        lock_registry=lock_registry,
        availability_cache=availability_cache,
        template=ScheduleTemplate.from_settings(),
    )
