"""
Database models for the booking service.
"""

from .booking import BookingModel

__all__ = ["BookingModel"]
