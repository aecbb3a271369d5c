"""Scheduling schemas."""

from __future__ import annotations

from datetime import date, datetime, time
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from tutorhub.modules.scheduling.availability import TimeSlot


class _WindowBounds(BaseModel):
    start_time: time
    end_time: time

    @model_validator(mode="after")
    def validate_bounds(self) -> "_WindowBounds":
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class RecurringAvailabilityCreate(_WindowBounds):
    """Create weekly availability window request (0 = Sunday)."""

    teacher_id: UUID
    day_of_week: int = Field(ge=0, le=6)
    subjects: list[str] = Field(default_factory=list)
    is_available: bool = True


class RecurringAvailabilityRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    teacher_id: UUID
    day_of_week: int
    start_time: time
    end_time: time
    subjects: list[str]
    is_available: bool
    created_at: datetime


class OneOffAvailabilityCreate(_WindowBounds):
    """Create single-date availability window request."""

    teacher_id: UUID
    date: date
    is_available: bool = True


class OneOffAvailabilityRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    teacher_id: UUID
    date: date
    start_time: time
    end_time: time
    is_available: bool
    created_at: datetime


class TimeSlotRead(BaseModel):
    """Resolved slot on the weekly grid."""

    start_time: datetime
    date: date
    time: str
    duration_minutes: int
    available: bool

    @classmethod
    def from_slot(cls, slot: TimeSlot) -> "TimeSlotRead":
        return cls(
            start_time=slot.start_time,
            date=slot.date,
            time=slot.time,
            duration_minutes=slot.duration_minutes,
            available=slot.available,
        )


class WeekSlotsRead(BaseModel):
    teacher_id: UUID
    week_start: date
    duration_minutes: int
    timezone: str
    slots: list[TimeSlotRead]
