from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, time, timedelta
from types import SimpleNamespace
from uuid import UUID, uuid4
from zoneinfo import ZoneInfo

import pytest
from sqlalchemy.exc import InternalError, OperationalError

import tutorhub.modules.scheduling.service as scheduling_service_module
from tutorhub.core.enums import RoleEnum
from tutorhub.modules.scheduling.schemas import RecurringAvailabilityCreate
from tutorhub.modules.scheduling.service import SchedulingService, teacher_timezone
from tutorhub.shared.exceptions import NotFoundException, UnauthorizedException, ValidationException

FIXED_NOW = datetime(2026, 10, 18, 12, 0, tzinfo=UTC)
WEEK_START = date(2026, 10, 19)


@dataclass
class FakeWindow:
    teacher_id: UUID
    day_of_week: int
    start_time: time
    end_time: time
    is_available: bool = True
    subjects: list[str] = field(default_factory=list)
    id: UUID = field(default_factory=uuid4)


@dataclass
class FakeLesson:
    scheduled_time: datetime
    duration_minutes: int


class FakeTransaction:
    """Mimics Postgres: an error outside a savepoint aborts the transaction."""

    def __init__(self) -> None:
        self.savepoint_depth = 0
        self.savepoints_rolled_back = 0
        self.aborted = False

    def check(self) -> None:
        if self.aborted:
            raise InternalError("SELECT", {}, Exception("current transaction is aborted"))

    def fail(self, statement: str) -> None:
        if self.savepoint_depth == 0:
            self.aborted = True
        raise OperationalError(statement, {}, Exception("relation missing"))


class FakeSchedulingRepository:
    def __init__(
        self,
        recurring: list[FakeWindow],
        transaction: FakeTransaction,
        *,
        fail_one_off: bool = False,
    ) -> None:
        self.recurring = recurring
        self.transaction = transaction
        self.fail_one_off = fail_one_off
        self.deleted: list[FakeWindow] = []
        self.savepoints = 0

    @asynccontextmanager
    async def savepoint(self):
        self.savepoints += 1
        self.transaction.savepoint_depth += 1
        try:
            yield
        except Exception:
            self.transaction.savepoints_rolled_back += 1
            raise
        finally:
            self.transaction.savepoint_depth -= 1

    async def list_recurring(self, teacher_id: UUID, only_available: bool = False) -> list[FakeWindow]:
        self.transaction.check()
        return [
            window
            for window in self.recurring
            if window.teacher_id == teacher_id and (window.is_available or not only_available)
        ]

    async def list_one_off(self, teacher_id: UUID, date_from=None, date_to=None, only_available=False):
        self.transaction.check()
        if self.fail_one_off:
            self.transaction.fail("SELECT teacher_availability_one_off")
        return []

    async def create_recurring(self, **values) -> FakeWindow:
        window = FakeWindow(**values)
        self.recurring.append(window)
        return window

    async def get_recurring_by_id(self, window_id: UUID) -> FakeWindow | None:
        return next((window for window in self.recurring if window.id == window_id), None)

    async def delete_window(self, window: FakeWindow) -> None:
        self.recurring.remove(window)
        self.deleted.append(window)


class FakeIdentityRepository:
    def __init__(self, users: dict[UUID, SimpleNamespace]) -> None:
        self.users = users

    async def get_user_by_id(self, user_id: UUID) -> SimpleNamespace | None:
        return self.users.get(user_id)


class FakeLessonsRepository:
    def __init__(self, lessons: list[FakeLesson], transaction: FakeTransaction) -> None:
        self.lessons = lessons
        self.transaction = transaction
        self.ranges: list[tuple[datetime, datetime]] = []

    async def list_blocking_lessons(self, teacher_id: UUID, start_at: datetime, end_at: datetime):
        self.transaction.check()
        self.ranges.append((start_at, end_at))
        return self.lessons


class FakeAuditRepository:
    def __init__(self) -> None:
        self.logs: list[dict] = []

    async def create_audit_log(self, **values) -> None:
        self.logs.append(values)


def make_user(role: RoleEnum, timezone: str = "UTC", user_id: UUID | None = None) -> SimpleNamespace:
    return SimpleNamespace(id=user_id or uuid4(), role=SimpleNamespace(name=role), timezone=timezone)


def make_service(
    teacher: SimpleNamespace,
    recurring: list[FakeWindow] | None = None,
    lessons: list[FakeLesson] | None = None,
    *,
    fail_one_off: bool = False,
):
    transaction = FakeTransaction()
    repo = FakeSchedulingRepository(recurring or [], transaction, fail_one_off=fail_one_off)
    lessons_repo = FakeLessonsRepository(lessons or [], transaction)
    audit_repo = FakeAuditRepository()
    service = SchedulingService(
        repository=repo,
        identity_repository=FakeIdentityRepository({teacher.id: teacher}),
        lessons_repository=lessons_repo,
        audit_repository=audit_repo,
    )
    return service, repo, lessons_repo, audit_repo


@pytest.fixture(autouse=True)
def fixed_now(monkeypatch: pytest.MonkeyPatch) -> datetime:
    monkeypatch.setattr(scheduling_service_module, "utc_now", lambda: FIXED_NOW)
    return FIXED_NOW


def test_unknown_timezone_falls_back_to_utc() -> None:
    assert teacher_timezone(make_user(RoleEnum.TEACHER, "Mars/Olympus")) == ZoneInfo("UTC")
    assert teacher_timezone(make_user(RoleEnum.TEACHER, "Europe/London")) == ZoneInfo("Europe/London")


@pytest.mark.asyncio
async def test_week_slots_mark_booked_cells() -> None:
    teacher = make_user(RoleEnum.TEACHER)
    service, _, lessons_repo, _ = make_service(
        teacher,
        [FakeWindow(teacher.id, 1, time(9, 0), time(10, 0))],
        [FakeLesson(datetime(2026, 10, 19, 9, 30, tzinfo=UTC), 30)],
    )

    slots, tz = await service.get_week_slots(teacher.id, WEEK_START, 30)

    assert tz == ZoneInfo("UTC")
    assert [(slot.time, slot.available) for slot in slots] == [("09:00", True), ("09:30", False)]
    range_start, range_end = lessons_repo.ranges[0]
    assert range_start == datetime(2026, 10, 19, 0, 0, tzinfo=UTC) - timedelta(minutes=60)
    assert range_end == datetime(2026, 10, 26, 0, 0, tzinfo=UTC)


@pytest.mark.asyncio
async def test_failing_source_is_treated_as_empty(caplog: pytest.LogCaptureFixture) -> None:
    teacher = make_user(RoleEnum.TEACHER)
    service, _, _, _ = make_service(
        teacher,
        [FakeWindow(teacher.id, 1, time(9, 0), time(10, 0))],
        fail_one_off=True,
    )

    slots, _ = await service.get_week_slots(teacher.id, WEEK_START, 60)

    assert [slot.time for slot in slots] == ["09:00"]
    assert "one-off availability" in caplog.text


@pytest.mark.asyncio
async def test_failing_source_does_not_hide_bookings(caplog: pytest.LogCaptureFixture) -> None:
    teacher = make_user(RoleEnum.TEACHER)
    service, repo, _, _ = make_service(
        teacher,
        [FakeWindow(teacher.id, 1, time(9, 0), time(10, 0))],
        [FakeLesson(datetime(2026, 10, 19, 9, 30, tzinfo=UTC), 30)],
        fail_one_off=True,
    )

    slots, _ = await service.get_week_slots(teacher.id, WEEK_START, 30)

    assert [(slot.time, slot.available) for slot in slots] == [("09:00", True), ("09:30", False)]
    assert repo.savepoints == 3
    assert repo.transaction.savepoints_rolled_back == 1
    assert repo.transaction.aborted is False
    assert "Failed to load lessons" not in caplog.text


@pytest.mark.asyncio
async def test_week_must_start_on_monday() -> None:
    teacher = make_user(RoleEnum.TEACHER)
    service, *_ = make_service(teacher)

    with pytest.raises(ValidationException):
        await service.get_week_slots(teacher.id, WEEK_START + timedelta(days=1), 30)


@pytest.mark.asyncio
async def test_unsupported_duration_is_validation_error() -> None:
    teacher = make_user(RoleEnum.TEACHER)
    service, *_ = make_service(teacher)

    with pytest.raises(ValidationException):
        await service.get_week_slots(teacher.id, WEEK_START, 90)


@pytest.mark.asyncio
async def test_non_teacher_has_no_slots() -> None:
    student = make_user(RoleEnum.STUDENT)
    service, *_ = make_service(student)

    with pytest.raises(NotFoundException):
        await service.get_week_slots(student.id, WEEK_START, 30)


@pytest.mark.asyncio
async def test_teacher_manages_only_own_windows() -> None:
    teacher = make_user(RoleEnum.TEACHER)
    other_teacher = make_user(RoleEnum.TEACHER)
    service, repo, _, audit_repo = make_service(teacher)
    payload = RecurringAvailabilityCreate(
        teacher_id=teacher.id,
        day_of_week=0,
        start_time=time(14, 0),
        end_time=time(16, 0),
        subjects=["quran"],
    )

    with pytest.raises(UnauthorizedException):
        await service.create_recurring(payload, other_teacher)

    window = await service.create_recurring(payload, teacher)
    assert repo.recurring == [window]
    assert audit_repo.logs[-1]["action"] == "availability.recurring.create"

    admin = make_user(RoleEnum.ADMIN)
    await service.delete_recurring(window.id, admin)
    assert repo.deleted == [window]
    assert audit_repo.logs[-1]["action"] == "availability.recurring.delete"


@pytest.mark.asyncio
async def test_delete_missing_window_is_not_found() -> None:
    teacher = make_user(RoleEnum.TEACHER)
    service, *_ = make_service(teacher)

    with pytest.raises(NotFoundException):
        await service.delete_recurring(uuid4(), teacher)
