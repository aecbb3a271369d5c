"""Lessons repository layer."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from tutorhub.core.enums import LessonStatusEnum, RoleEnum
from tutorhub.modules.lessons.models import Lesson


class LessonsRepository:
    """DB operations for lessons domain."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_lesson_by_id(self, lesson_id: UUID) -> Lesson | None:
        stmt = select(Lesson).where(Lesson.id == lesson_id)
        return await self.session.scalar(stmt)

    async def list_blocking_lessons(
        self,
        teacher_id: UUID,
        start_at: datetime,
        end_at: datetime,
    ) -> list[Lesson]:
        """Non-cancelled lessons of a teacher starting inside ``[start_at, end_at)``."""
        stmt = (
            select(Lesson)
            .where(
                Lesson.teacher_id == teacher_id,
                Lesson.scheduled_time >= start_at,
                Lesson.scheduled_time < end_at,
                Lesson.status.not_in(LessonStatusEnum.cancelled()),
            )
            .order_by(Lesson.scheduled_time.asc())
        )
        return (await self.session.scalars(stmt)).all()

    async def count_completed_lessons(self, user_id: UUID) -> int:
        stmt = select(func.count()).where(
            Lesson.student_id == user_id,
            Lesson.status == LessonStatusEnum.COMPLETED,
        )
        return int((await self.session.scalar(stmt)) or 0)

    async def list_lessons_for_user(
        self,
        user_id: UUID,
        role_name: RoleEnum,
        limit: int,
        offset: int,
    ) -> tuple[list[Lesson], int]:
        base_stmt: Select[tuple[Lesson]] = select(Lesson)

        if role_name == RoleEnum.STUDENT:
            base_stmt = base_stmt.where(Lesson.student_id == user_id)
        elif role_name == RoleEnum.TEACHER:
            base_stmt = base_stmt.where(or_(Lesson.teacher_id == user_id, Lesson.student_id == user_id))

        count_stmt = select(func.count()).select_from(base_stmt.subquery())
        total = int((await self.session.scalar(count_stmt)) or 0)

        stmt = base_stmt.order_by(Lesson.scheduled_time.asc()).limit(limit).offset(offset)
        items = (await self.session.scalars(stmt)).all()
        return items, total

    async def set_status(self, lesson: Lesson, status: LessonStatusEnum) -> Lesson:
        lesson.status = status
        await self.session.flush()
        return lesson
