"""
Unit tests for settings validation.
"""

from datetime import time

from pydantic import ValidationError
import pytest

from app.core.config import Settings


def test_defaults():
    config = Settings()

    assert config.schedule_day_start == time(9)
    assert config.schedule_day_end == time(17)
    assert config.schedule_slot_minutes == 60
    assert config.availability_cache_ttl_seconds == 600.0
    assert config.availability_cache_max_entries == 100
    assert config.default_page_size == 20
    assert config.max_page_size == 100


def test_log_level_is_normalized():
    assert Settings(log_level=" debug ").log_level == "DEBUG"


def test_inverted_schedule_rejected():
    with pytest.raises(ValidationError):
        Settings(schedule_day_start=time(18), schedule_day_end=time(9))


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("SCHEDULE_SLOT_MINUTES", "30")
    monkeypatch.setenv("AVAILABILITY_CACHE_TTL_SECONDS", "5")

    config = Settings()

    assert config.schedule_slot_minutes == 30
    assert config.availability_cache_ttl_seconds == 5.0


@pytest.mark.parametrize(
    "field, value",
    [
        ("availability_cache_ttl_seconds", 0),
        ("availability_cache_max_entries", 0),
        ("schedule_slot_minutes", 0),
    ],
)
def test_non_positive_limits_rejected(field, value):
    with pytest.raises(ValidationError):
        Settings(**{field: value})
