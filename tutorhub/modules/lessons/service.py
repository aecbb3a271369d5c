"""Lessons business logic layer."""

from __future__ import annotations

from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tutorhub.core.database import get_db_session
from tutorhub.core.enums import LessonStatusEnum, RoleEnum
from tutorhub.modules.identity.models import User
from tutorhub.modules.lessons.models import Lesson
from tutorhub.modules.lessons.repository import LessonsRepository
from tutorhub.modules.lessons.schemas import LessonStatusUpdate
from tutorhub.shared.exceptions import BusinessRuleException, NotFoundException, UnauthorizedException

FINAL_STATUSES = (LessonStatusEnum.COMPLETED, *LessonStatusEnum.cancelled())


class LessonsService:
    """Lessons domain service."""

    def __init__(self, repository: LessonsRepository) -> None:
        self.repository = repository

    async def update_status(self, lesson_id: UUID, payload: LessonStatusUpdate, actor: User) -> Lesson:
        """Complete or cancel a lesson.

        The teacher may complete or cancel their own lesson; the student may
        only cancel theirs. Final statuses are never changed again.
        """
        lesson = await self.repository.get_lesson_by_id(lesson_id)
        if lesson is None:
            raise NotFoundException("Lesson not found")

        if payload.status == LessonStatusEnum.CANCELLED_BY_STUDENT:
            allowed = lesson.student_id == actor.id
        else:
            allowed = lesson.teacher_id == actor.id
        if not allowed and actor.role.name != RoleEnum.ADMIN:
            raise UnauthorizedException("Lesson status change not permitted")

        if lesson.status in FINAL_STATUSES:
            raise BusinessRuleException("Lesson is already finalized")
        if payload.status in (LessonStatusEnum.PENDING, LessonStatusEnum.BOOKED):
            raise BusinessRuleException("Lesson can only be completed or cancelled")

        return await self.repository.set_status(lesson, payload.status)

    async def list_lessons(self, actor: User, limit: int, offset: int) -> tuple[list[Lesson], int]:
        """List lessons according to actor role."""
        return await self.repository.list_lessons_for_user(actor.id, actor.role.name, limit, offset)


async def get_lessons_service(session: AsyncSession = Depends(get_db_session)) -> LessonsService:
    """Dependency provider for lessons service."""
    return LessonsService(LessonsRepository(session))
