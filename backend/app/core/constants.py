"""Application-wide constants for the booking service."""

from __future__ import annotations

BRAND_NAME = "Appointment Booking"

API_TITLE = f"{BRAND_NAME} API"
API_VERSION = "1.0.0"
API_DESCRIPTION = (
    "Conflict-free booking of professionals with per-professional serialization "
    "and cached daily availability."
)

ROOT_STATUS_MESSAGE = f"{BRAND_NAME} Service is running"

# Wire formats
DATE_FORMAT = "%Y-%m-%d"
DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S"

# Pagination
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# Text constraints
MAX_ID_LENGTH = 64
MAX_SERVICE_TYPE_LENGTH = 100
MAX_NOTES_LENGTH = 1000

ALLOWED_ORIGINS = ["*"]
