"""Scheduling repository layer."""

from __future__ import annotations

from datetime import date, time
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tutorhub.modules.scheduling.models import OneOffAvailability, RecurringAvailability


class SchedulingRepository:
    """DB access for teacher availability windows."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def savepoint(self):
        """Nested transaction so a failed read leaves the outer transaction usable."""
        return self.session.begin_nested()

    async def create_recurring(
        self,
        teacher_id: UUID,
        day_of_week: int,
        start_time: time,
        end_time: time,
        subjects: list[str],
        is_available: bool,
    ) -> RecurringAvailability:
        window = RecurringAvailability(
            teacher_id=teacher_id,
            day_of_week=day_of_week,
            start_time=start_time,
            end_time=end_time,
            subjects=subjects,
            is_available=is_available,
        )
        self.session.add(window)
        await self.session.flush()
        return window

    async def get_recurring_by_id(self, window_id: UUID) -> RecurringAvailability | None:
        stmt = select(RecurringAvailability).where(RecurringAvailability.id == window_id)
        return await self.session.scalar(stmt)

    async def list_recurring(self, teacher_id: UUID, only_available: bool = False) -> list[RecurringAvailability]:
        stmt = select(RecurringAvailability).where(RecurringAvailability.teacher_id == teacher_id)
        if only_available:
            stmt = stmt.where(RecurringAvailability.is_available.is_(True))
        stmt = stmt.order_by(RecurringAvailability.day_of_week.asc(), RecurringAvailability.start_time.asc())
        return (await self.session.scalars(stmt)).all()

    async def create_one_off(
        self,
        teacher_id: UUID,
        day: date,
        start_time: time,
        end_time: time,
        is_available: bool,
    ) -> OneOffAvailability:
        window = OneOffAvailability(
            teacher_id=teacher_id,
            date=day,
            start_time=start_time,
            end_time=end_time,
            is_available=is_available,
        )
        self.session.add(window)
        await self.session.flush()
        return window

    async def get_one_off_by_id(self, window_id: UUID) -> OneOffAvailability | None:
        stmt = select(OneOffAvailability).where(OneOffAvailability.id == window_id)
        return await self.session.scalar(stmt)

    async def list_one_off(
        self,
        teacher_id: UUID,
        date_from: date | None = None,
        date_to: date | None = None,
        only_available: bool = False,
    ) -> list[OneOffAvailability]:
        stmt = select(OneOffAvailability).where(OneOffAvailability.teacher_id == teacher_id)
        if date_from is not None:
            stmt = stmt.where(OneOffAvailability.date >= date_from)
        if date_to is not None:
            stmt = stmt.where(OneOffAvailability.date <= date_to)
        if only_available:
            stmt = stmt.where(OneOffAvailability.is_available.is_(True))
        stmt = stmt.order_by(OneOffAvailability.date.asc(), OneOffAvailability.start_time.asc())
        return (await self.session.scalars(stmt)).all()

    async def delete_window(self, window: RecurringAvailability | OneOffAvailability) -> None:
        await self.session.delete(window)
        await self.session.flush()
