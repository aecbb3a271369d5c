from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, date, datetime, time
from zoneinfo import ZoneInfo

import pytest

from tutorhub.modules.scheduling.availability import (
    build_booked_keys,
    resolve_week_slots,
    sunday_based_weekday,
)

WEEK_START = date(2026, 10, 19)  # Monday
BEFORE_WEEK = datetime(2026, 10, 18, 12, 0, tzinfo=UTC)


@dataclass
class FakeRecurring:
    day_of_week: int
    start_time: time
    end_time: time
    is_available: bool = True


@dataclass
class FakeOneOff:
    date: date
    start_time: time
    end_time: time
    is_available: bool = True


@dataclass
class FakeLesson:
    scheduled_time: datetime
    duration_minutes: int


def _resolve(recurring=(), one_off=(), bookings=(), duration=30, now=BEFORE_WEEK, tz=UTC):
    return resolve_week_slots(
        week_start=WEEK_START,
        duration_minutes=duration,
        recurring=list(recurring),
        one_off=list(one_off),
        bookings=list(bookings),
        now=now,
        tz=tz,
    )


def test_weekday_numbering_starts_on_sunday() -> None:
    assert sunday_based_weekday(date(2026, 10, 25)) == 0
    assert sunday_based_weekday(date(2026, 10, 19)) == 1
    assert sunday_based_weekday(date(2026, 10, 24)) == 6


def test_recurring_window_yields_half_hour_slots() -> None:
    slots = _resolve(recurring=[FakeRecurring(1, time(9, 0), time(10, 0))])

    assert [(slot.date, slot.time) for slot in slots] == [
        (WEEK_START, "09:00"),
        (WEEK_START, "09:30"),
    ]
    assert all(slot.available for slot in slots)
    assert all(slot.duration_minutes == 30 for slot in slots)


def test_sunday_window_lands_on_last_day_of_week() -> None:
    slots = _resolve(recurring=[FakeRecurring(0, time(14, 0), time(15, 0))], duration=60)

    assert [(slot.date, slot.time) for slot in slots] == [(date(2026, 10, 25), "14:00")]


def test_window_walk_keeps_start_inside_window() -> None:
    slots = _resolve(recurring=[FakeRecurring(1, time(9, 0), time(10, 30))], duration=60)

    assert [slot.time for slot in slots] == ["09:00", "10:00"]


def test_off_grid_window_starts_produce_no_slots() -> None:
    slots = _resolve(recurring=[FakeRecurring(1, time(9, 15), time(10, 0))])

    assert slots == []


def test_slots_at_or_before_now_are_omitted() -> None:
    now = datetime(2026, 10, 19, 9, 0, tzinfo=UTC)
    slots = _resolve(recurring=[FakeRecurring(1, time(9, 0), time(10, 0))], now=now)

    assert [slot.time for slot in slots] == ["09:30"]


def test_hour_lesson_blocks_two_half_hour_cells() -> None:
    booking = FakeLesson(datetime(2026, 10, 19, 9, 0, tzinfo=UTC), 60)
    slots = _resolve(
        recurring=[FakeRecurring(1, time(9, 0), time(11, 0))],
        bookings=[booking],
    )

    availability = {slot.time: slot.available for slot in slots}
    assert availability == {"09:00": False, "09:30": False, "10:00": True, "10:30": True}


def test_misaligned_booking_blocks_every_touched_cell() -> None:
    keys = build_booked_keys([FakeLesson(datetime(2026, 10, 19, 9, 15, tzinfo=UTC), 30)], 30, UTC)

    assert keys == {(WEEK_START, "09:00"), (WEEK_START, "09:30")}


def test_half_hour_booking_blocks_containing_hour_cell() -> None:
    keys = build_booked_keys([FakeLesson(datetime(2026, 10, 19, 9, 30, tzinfo=UTC), 30)], 60, UTC)

    assert keys == {(WEEK_START, "09:00")}


def test_one_off_windows_add_to_recurring_availability() -> None:
    slots = _resolve(
        recurring=[FakeRecurring(1, time(9, 0), time(10, 0))],
        one_off=[
            FakeOneOff(date(2026, 10, 21), time(18, 0), time(19, 0)),
            FakeOneOff(date(2026, 10, 28), time(18, 0), time(19, 0)),
            FakeOneOff(date(2026, 10, 22), time(8, 0), time(9, 0), is_available=False),
        ],
        duration=60,
    )

    assert [(slot.date, slot.time) for slot in slots] == [
        (WEEK_START, "09:00"),
        (date(2026, 10, 21), "18:00"),
    ]


def test_disabled_recurring_window_is_ignored() -> None:
    slots = _resolve(recurring=[FakeRecurring(1, time(9, 0), time(10, 0), is_available=False)])

    assert slots == []


def test_windows_and_bookings_use_teacher_timezone() -> None:
    london = ZoneInfo("Europe/London")
    # 08:00 UTC is 09:00 in London before the October clock change.
    booking = FakeLesson(datetime(2026, 10, 19, 8, 0, tzinfo=UTC), 30)
    slots = _resolve(
        recurring=[FakeRecurring(1, time(9, 0), time(10, 0))],
        bookings=[booking],
        tz=london,
    )

    assert slots[0].start_time == datetime(2026, 10, 19, 9, 0, tzinfo=london)
    assert slots[0].start_time.astimezone(UTC).hour == 8
    assert [slot.available for slot in slots] == [False, True]


def test_unsupported_duration_is_rejected() -> None:
    with pytest.raises(ValueError):
        _resolve(recurring=[FakeRecurring(1, time(9, 0), time(10, 0))], duration=45)
