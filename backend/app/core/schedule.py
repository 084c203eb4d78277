# backend/app/core/schedule.py
"""
Daily schedule template.

Defines the fixed working window and the slot granularity used to derive
availability. All professionals share the same template.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import List, Tuple

from .config import Settings, settings


@dataclass(frozen=True)
class ScheduleTemplate:
    """Working window [day_start, day_end) split into slots of slot_minutes."""

    day_start: time = time(9, 0)
    day_end: time = time(17, 0)
    slot_minutes: int = 60

    def __post_init__(self) -> None:
        if self.day_start >= self.day_end:
            raise ValueError("day_start must be before day_end")
        if self.slot_minutes <= 0:
            raise ValueError("slot_minutes must be positive")

    @classmethod
    def from_settings(cls, config: Settings = settings) -> "ScheduleTemplate":
        return cls(
            day_start=config.schedule_day_start,
            day_end=config.schedule_day_end,
            slot_minutes=config.schedule_slot_minutes,
        )

    @property
    def slot_length(self) -> timedelta:
        return timedelta(minutes=self.slot_minutes)

    def slots_for(self, target_date: date) -> List[Tuple[datetime, datetime]]:
        """
        Partition the working window of ``target_date`` into fixed-size slots.

        A trailing remainder shorter than one slot is dropped.
        """
        window_end = datetime.combine(target_date, self.day_end)
        current = datetime.combine(target_date, self.day_start)
        slots: List[Tuple[datetime, datetime]] = []
        while current + self.slot_length <= window_end:
            slots.append((current, current + self.slot_length))
            current += self.slot_length
        return slots


def day_window(target_date: date) -> Tuple[datetime, datetime]:
    """Return the half-open [midnight, next midnight) window for a date."""
    start = datetime.combine(target_date, time.min)
    return start, start + timedelta(days=1)
