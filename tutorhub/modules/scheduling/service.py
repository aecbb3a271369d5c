"""Scheduling business logic layer."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from datetime import date, datetime, time, timedelta
from typing import TypeVar
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tutorhub.core.database import get_db_session
from tutorhub.core.enums import RoleEnum
from tutorhub.integrations.edge_functions import AvailableSlotsResponse, EdgeFunctionsClient
from tutorhub.modules.audit.repository import AuditRepository
from tutorhub.modules.identity.models import User
from tutorhub.modules.identity.repository import IdentityRepository
from tutorhub.modules.lessons.repository import LessonsRepository
from tutorhub.modules.scheduling.availability import ALLOWED_DURATIONS, TimeSlot, resolve_week_slots
from tutorhub.modules.scheduling.models import OneOffAvailability, RecurringAvailability
from tutorhub.modules.scheduling.repository import SchedulingRepository
from tutorhub.modules.scheduling.schemas import OneOffAvailabilityCreate, RecurringAvailabilityCreate
from tutorhub.shared.exceptions import NotFoundException, UnauthorizedException, ValidationException
from tutorhub.shared.utils import utc_now

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_LESSON_MINUTES = max(ALLOWED_DURATIONS)


def teacher_timezone(teacher: User) -> ZoneInfo:
    """Zone the teacher's windows are expressed in; unknown names fall back to UTC."""
    try:
        return ZoneInfo(teacher.timezone or "UTC")
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r for teacher %s, using UTC", teacher.timezone, teacher.id)
        return ZoneInfo("UTC")


class SchedulingService:
    """Availability management and weekly slot resolution."""

    def __init__(
        self,
        repository: SchedulingRepository,
        identity_repository: IdentityRepository,
        lessons_repository: LessonsRepository,
        audit_repository: AuditRepository,
    ) -> None:
        self.repository = repository
        self.identity_repository = identity_repository
        self.lessons_repository = lessons_repository
        self.audit_repository = audit_repository

    async def _fetch_or_empty(
        self,
        source: str,
        teacher_id: UUID,
        fetch: Callable[[], Awaitable[Sequence[T]]],
    ) -> Sequence[T]:
        try:
            async with self.repository.savepoint():
                return await fetch()
        except SQLAlchemyError:
            logger.exception("Failed to load %s for teacher %s; treating as empty", source, teacher_id)
            return []

    async def get_week_slots(
        self,
        teacher_id: UUID,
        week_start: date,
        duration_minutes: int,
    ) -> tuple[list[TimeSlot], ZoneInfo]:
        """Resolve bookable slots of a teacher for one Monday-based week.

        Each source (weekly windows, one-off windows, lessons) is loaded in
        its own savepoint; a failing source is logged and contributes nothing.
        """
        if week_start.weekday() != 0:
            raise ValidationException("week_start must be a Monday")
        if duration_minutes not in ALLOWED_DURATIONS:
            raise ValidationException("duration_minutes must be 30 or 60")

        teacher = await self.identity_repository.get_user_by_id(teacher_id)
        if teacher is None or teacher.role.name != RoleEnum.TEACHER:
            raise NotFoundException("Teacher not found")
        tz = teacher_timezone(teacher)

        week_end = week_start + timedelta(days=7)
        range_start = datetime.combine(week_start, time.min, tzinfo=tz) - timedelta(minutes=MAX_LESSON_MINUTES)
        range_end = datetime.combine(week_end, time.min, tzinfo=tz)

        recurring = await self._fetch_or_empty(
            "recurring availability",
            teacher_id,
            lambda: self.repository.list_recurring(teacher_id, only_available=True),
        )
        one_off = await self._fetch_or_empty(
            "one-off availability",
            teacher_id,
            lambda: self.repository.list_one_off(
                teacher_id,
                date_from=week_start,
                date_to=week_end - timedelta(days=1),
                only_available=True,
            ),
        )
        bookings = await self._fetch_or_empty(
            "lessons",
            teacher_id,
            lambda: self.lessons_repository.list_blocking_lessons(teacher_id, range_start, range_end),
        )

        slots = resolve_week_slots(
            week_start=week_start,
            duration_minutes=duration_minutes,
            recurring=recurring,
            one_off=one_off,
            bookings=bookings,
            now=utc_now(),
            tz=tz,
        )
        return slots, tz

    def _ensure_can_manage(self, teacher_id: UUID, actor: User) -> None:
        if actor.role.name == RoleEnum.ADMIN:
            return
        if actor.role.name != RoleEnum.TEACHER or actor.id != teacher_id:
            raise UnauthorizedException("Only the teacher or admin can manage availability")

    async def create_recurring(self, payload: RecurringAvailabilityCreate, actor: User) -> RecurringAvailability:
        """Add a weekly availability window."""
        self._ensure_can_manage(payload.teacher_id, actor)
        window = await self.repository.create_recurring(
            teacher_id=payload.teacher_id,
            day_of_week=payload.day_of_week,
            start_time=payload.start_time,
            end_time=payload.end_time,
            subjects=payload.subjects,
            is_available=payload.is_available,
        )
        await self.audit_repository.create_audit_log(
            actor_id=actor.id,
            action="availability.recurring.create",
            entity_type="teacher_availability",
            entity_id=str(window.id),
            payload={
                "teacher_id": str(window.teacher_id),
                "day_of_week": window.day_of_week,
                "start_time": window.start_time.isoformat(),
                "end_time": window.end_time.isoformat(),
            },
        )
        return window

    async def list_recurring(self, teacher_id: UUID) -> list[RecurringAvailability]:
        return await self.repository.list_recurring(teacher_id)

    async def delete_recurring(self, window_id: UUID, actor: User) -> None:
        window = await self.repository.get_recurring_by_id(window_id)
        if window is None:
            raise NotFoundException("Availability window not found")
        self._ensure_can_manage(window.teacher_id, actor)
        await self.repository.delete_window(window)
        await self.audit_repository.create_audit_log(
            actor_id=actor.id,
            action="availability.recurring.delete",
            entity_type="teacher_availability",
            entity_id=str(window_id),
            payload={"teacher_id": str(window.teacher_id)},
        )

    async def create_one_off(self, payload: OneOffAvailabilityCreate, actor: User) -> OneOffAvailability:
        """Add availability for a single date."""
        self._ensure_can_manage(payload.teacher_id, actor)
        window = await self.repository.create_one_off(
            teacher_id=payload.teacher_id,
            day=payload.date,
            start_time=payload.start_time,
            end_time=payload.end_time,
            is_available=payload.is_available,
        )
        await self.audit_repository.create_audit_log(
            actor_id=actor.id,
            action="availability.one_off.create",
            entity_type="teacher_availability_one_off",
            entity_id=str(window.id),
            payload={
                "teacher_id": str(window.teacher_id),
                "date": window.date.isoformat(),
                "start_time": window.start_time.isoformat(),
                "end_time": window.end_time.isoformat(),
            },
        )
        return window

    async def list_one_off(self, teacher_id: UUID, date_from: date | None) -> list[OneOffAvailability]:
        return await self.repository.list_one_off(teacher_id, date_from=date_from)

    async def delete_one_off(self, window_id: UUID, actor: User) -> None:
        window = await self.repository.get_one_off_by_id(window_id)
        if window is None:
            raise NotFoundException("Availability window not found")
        self._ensure_can_manage(window.teacher_id, actor)
        await self.repository.delete_window(window)
        await self.audit_repository.create_audit_log(
            actor_id=actor.id,
            action="availability.one_off.delete",
            entity_type="teacher_availability_one_off",
            entity_id=str(window_id),
            payload={"teacher_id": str(window.teacher_id)},
        )


async def get_scheduling_service(session: AsyncSession = Depends(get_db_session)) -> SchedulingService:
    """Dependency provider for scheduling service."""
    return SchedulingService(
        repository=SchedulingRepository(session),
        identity_repository=IdentityRepository(session),
        lessons_repository=LessonsRepository(session),
        audit_repository=AuditRepository(session),
    )


async def search_remote_slots(
    client: EdgeFunctionsClient,
    date_from: date | None,
    date_to: date | None,
    teacher_id: UUID | None,
    subject: str | None,
) -> AvailableSlotsResponse:
    """Alternative slot source backed by the remote slot search."""
    if date_from is not None and date_to is not None and date_to < date_from:
        raise ValidationException("'to' must not be before 'from'")
    return await client.get_available_slots(date_from, date_to, teacher_id, subject)
