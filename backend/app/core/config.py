# backend/app/core/config.py
from datetime import time
import logging
import os
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE


def is_running_tests() -> bool:
    """
    Detect if code is running under pytest.

    PYTEST_CURRENT_TEST is set automatically by pytest during test runs, and is
    not expected to be present in production environments.
    """
    return os.getenv("PYTEST_CURRENT_TEST") is not None


logger = logging.getLogger(__name__)

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = Path(__file__).parent.parent.parent / ".env"  # Goes up to backend/.env
    logger.debug(f"[CONFIG] Looking for .env at: {env_path}")
    load_dotenv(env_path)


class Settings(BaseSettings):
    environment: Literal["development", "test", "production"] = Field(
        default="development",
        description="Deployment environment",
    )
    log_level: str = Field(default="INFO", description="Root log level")

    database_url: str = Field(
        default="sqlite:///./bookings.db",
        description="SQLAlchemy URL for the booking store",
    )
    database_echo: bool = Field(default=False, description="Echo SQL statements")

    # Daily schedule template
    schedule_day_start: time = Field(
        default=time(9, 0), description="Start of the daily working window"
    )
    schedule_day_end: time = Field(
        default=time(17, 0), description="End of the daily working window (exclusive)"
    )
    schedule_slot_minutes: int = Field(
        default=60, ge=5, le=24 * 60, description="Availability slot granularity in minutes"
    )

    # Availability cache
    availability_cache_ttl_seconds: float = Field(
        default=600.0, gt=0, description="Time-to-live for cached availability entries"
    )
    availability_cache_max_entries: int = Field(
        default=100, ge=1, description="Maximum cached (professional, date) entries"
    )

    # Pagination
    default_page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    max_page_size: int = Field(default=MAX_PAGE_SIZE, ge=1)

    is_testing: bool = Field(default_factory=is_running_tests)

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper() or "INFO"
        return value

    @model_validator(mode="after")
    def _validate_schedule(self) -> "Settings":
        if self.schedule_day_start >= self.schedule_day_end:
            raise ValueError("schedule_day_start must be before schedule_day_end")
        return self


settings = Settings()
logger.info(
    "[CONFIG] environment=%s schedule=%s-%s/%smin cache_ttl=%ss cache_max=%s",
    settings.environment,
    settings.schedule_day_start,
    settings.schedule_day_end,
    settings.schedule_slot_minutes,
    settings.availability_cache_ttl_seconds,
    settings.availability_cache_max_entries,
)
