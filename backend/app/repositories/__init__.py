# backend/app/repositories/__init__.py
"""
Repository Pattern Implementation for the booking service.

This package provides the repository layer for data access,
separating business logic from database queries.

Key Components:
- BaseRepository: Foundation for repositories with generic read/delete operations
- BookingRepository: The booking store used by the booking core
- RepositoryFactory: Factory for creating repository instances

Usage:
    from app.repositories import RepositoryFactory

    # In a service:
    repository = RepositoryFactory.create_booking_repository(db)
    overlapping = repository.find_overlapping(professional_id, start, end)
"""

from .base_repository import BaseRepository
from .booking_repository import BookingRepository
from .factory import RepositoryFactory

__all__ = [
    "BaseRepository",
    "BookingRepository",
    "RepositoryFactory",
]
