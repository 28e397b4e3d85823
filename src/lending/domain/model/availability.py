"""Scheduling primitives used to place a Booking on the calendar."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timezone

from lending.domain.exceptions import ValidationError


@dataclass
class TimeSlot:
    """A time-of-day window, reused across calendar dates."""

    id: str | None
    start_time: time
    end_time: time

    def __post_init__(self) -> None:
        if self.end_time <= self.start_time:
            raise ValidationError("Time slot must end after it starts")


@dataclass
class Availability:
    """A reviewer's declared availability: one time slot on one date."""

    id: str | None
    user_id: str
    time_slot_id: str
    date: date
    group_id: str | None = None

    def starts_at(self, slot: TimeSlot) -> datetime:
        """Calendar date + slot start, in UTC."""
        if slot.id != self.time_slot_id:
            raise ValidationError("Time slot does not belong to this availability")
        return datetime.combine(self.date, slot.start_time, tzinfo=timezone.utc)
