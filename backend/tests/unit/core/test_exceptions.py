"""
Unit tests for domain exception to HTTP mapping.
"""

from fastapi import HTTPException

from app.core.exceptions import (
    GENERIC_ERROR_MESSAGE,
    BookingConflictException,
    BookingNotFoundException,
    ConflictException,
    DomainException,
    NotFoundException,
    ValidationException,
)


class TestHttpMapping:
    def test_validation_maps_to_400(self):
        exc = ValidationException("clientId is required", code="VALIDATION_ERROR")

        http_exc = exc.to_http_exception()

        assert isinstance(http_exc, HTTPException)
        assert http_exc.status_code == 400
        assert http_exc.detail["message"] == "clientId is required"
        assert http_exc.detail["code"] == "VALIDATION_ERROR"

    def test_conflict_maps_to_409(self):
        exc = BookingConflictException(details={"conflicting_booking_ids": ["A"]})

        http_exc = exc.to_http_exception()

        assert http_exc.status_code == 409
        assert http_exc.detail["message"] == "Time slot conflicts with existing booking"
        assert http_exc.detail["code"] == "BOOKING_CONFLICT"
        assert http_exc.detail["details"] == {"conflicting_booking_ids": ["A"]}

    def test_not_found_maps_to_404(self):
        http_exc = BookingNotFoundException("01ABC").to_http_exception()

        assert http_exc.status_code == 404
        assert http_exc.detail["message"] == "Booking not found with id: 01ABC"
        assert http_exc.detail["code"] == "BOOKING_NOT_FOUND"

    def test_unclassified_domain_error_is_generic_500(self):
        http_exc = DomainException("pool exhausted: host=db-1").to_http_exception()

        assert http_exc.status_code == 500
        assert http_exc.detail["message"] == GENERIC_ERROR_MESSAGE
        assert "db-1" not in str(http_exc.detail)


def test_hierarchy():
    assert issubclass(BookingConflictException, ConflictException)
    assert issubclass(BookingNotFoundException, NotFoundException)
    assert issubclass(ValidationException, DomainException)


def test_code_defaults_to_class_name():
    assert DomainException("x").code == "DomainException"
