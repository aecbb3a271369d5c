"""Weekly slot resolution from teacher availability and existing bookings.

Everything here is pure: callers load the windows and lessons, pass them in
together with ``now`` and the teacher's timezone, and get back the slot grid
for one Monday-to-Sunday week.

Keys are ``(date, "HH:MM")`` pairs in the teacher's local time. Recurring
windows are walked from their start in ``duration_minutes`` steps while the
step start is still inside the window; one-off windows are added on top for
their date. Only keys that also fall on the daily grid (midnight plus
multiples of the duration) can become slots.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Protocol

ALLOWED_DURATIONS = (30, 60)
DAYS_IN_WEEK = 7
MINUTES_IN_DAY = 24 * 60

SlotKey = tuple[date, str]


class RecurringWindow(Protocol):
    day_of_week: int
    start_time: time
    end_time: time
    is_available: bool


class OneOffWindow(Protocol):
    date: date
    start_time: time
    end_time: time
    is_available: bool


class BookedLesson(Protocol):
    scheduled_time: datetime
    duration_minutes: int


@dataclass(frozen=True, slots=True)
class TimeSlot:
    """Bookable (or already taken) start on the weekly grid."""

    start_time: datetime
    duration_minutes: int
    available: bool

    @property
    def date(self) -> date:
        return self.start_time.date()

    @property
    def time(self) -> str:
        return self.start_time.strftime("%H:%M")


def sunday_based_weekday(day: date) -> int:
    """Weekday number with Sunday as 0 and Saturday as 6."""
    return (day.weekday() + 1) % 7


def format_minutes(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def _minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def _walk_window(day: date, start: time, end: time, step: int) -> Iterable[SlotKey]:
    current = _minutes(start)
    stop = _minutes(end)
    while current < stop:
        yield day, format_minutes(current)
        current += step


def build_availability_keys(
    week_start: date,
    duration_minutes: int,
    recurring: Iterable[RecurringWindow],
    one_off: Iterable[OneOffWindow],
) -> set[SlotKey]:
    """Union of recurring and one-off window starts for the week."""
    week_days = [week_start + timedelta(days=offset) for offset in range(DAYS_IN_WEEK)]
    keys: set[SlotKey] = set()

    recurring_windows = [window for window in recurring if window.is_available]
    for day in week_days:
        weekday = sunday_based_weekday(day)
        for window in recurring_windows:
            if window.day_of_week == weekday:
                keys.update(_walk_window(day, window.start_time, window.end_time, duration_minutes))

    week_end = week_days[-1]
    for window in one_off:
        if window.is_available and week_start <= window.date <= week_end:
            keys.update(_walk_window(window.date, window.start_time, window.end_time, duration_minutes))

    return keys


def build_booked_keys(
    bookings: Iterable[BookedLesson],
    duration_minutes: int,
    tz: tzinfo,
) -> set[SlotKey]:
    """Grid cells touched by any booking.

    A booking marks every cell from the one containing its start up to the
    cell containing its last minute, so a 60 minute lesson blocks two
    30 minute cells and a lesson starting off-grid still blocks its cell.
    """
    step = timedelta(minutes=duration_minutes)
    keys: set[SlotKey] = set()
    for booking in bookings:
        local_start = booking.scheduled_time.astimezone(tz).replace(tzinfo=None)
        local_end = local_start + timedelta(minutes=booking.duration_minutes)

        midnight = datetime.combine(local_start.date(), time.min)
        offset = _minutes(local_start.time()) // duration_minutes * duration_minutes
        cell = midnight + timedelta(minutes=offset)
        while cell < local_end:
            keys.add((cell.date(), cell.strftime("%H:%M")))
            cell += step
    return keys


def resolve_week_slots(
    week_start: date,
    duration_minutes: int,
    recurring: Iterable[RecurringWindow],
    one_off: Iterable[OneOffWindow],
    bookings: Iterable[BookedLesson],
    now: datetime,
    tz: tzinfo,
) -> list[TimeSlot]:
    """Return the ordered slot list for the 7-day window starting ``week_start``.

    Days without availability contribute nothing and starts at or before
    ``now`` are dropped. A slot is ``available`` only when no booking touches
    its cell.
    """
    if duration_minutes not in ALLOWED_DURATIONS:
        raise ValueError(f"duration_minutes must be one of {ALLOWED_DURATIONS}")

    available = build_availability_keys(week_start, duration_minutes, recurring, one_off)
    if not available:
        return []
    booked = build_booked_keys(bookings, duration_minutes, tz)

    slots: list[TimeSlot] = []
    for offset in range(DAYS_IN_WEEK):
        day = week_start + timedelta(days=offset)
        for minute in range(0, MINUTES_IN_DAY, duration_minutes):
            key = (day, format_minutes(minute))
            if key not in available:
                continue
            start = datetime.combine(day, time(minute // 60, minute % 60), tzinfo=tz)
            if start <= now:
                continue
            slots.append(TimeSlot(start_time=start, duration_minutes=duration_minutes, available=key not in booked))
    return slots
