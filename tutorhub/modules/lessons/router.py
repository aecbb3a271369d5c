"""Lessons API router."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends

from tutorhub.modules.identity.service import get_current_user
from tutorhub.modules.lessons.schemas import LessonRead, LessonStatusUpdate
from tutorhub.modules.lessons.service import LessonsService, get_lessons_service
from tutorhub.shared.pagination import Page, build_page, get_pagination_params

router = APIRouter(prefix="/lessons", tags=["lessons"])


@router.patch("/{lesson_id}/status", response_model=LessonRead)
async def update_lesson_status(
    lesson_id: UUID,
    payload: LessonStatusUpdate,
    service: LessonsService = Depends(get_lessons_service),
    current_user=Depends(get_current_user),
) -> LessonRead:
    """Complete or cancel lesson."""
    lesson = await service.update_status(lesson_id, payload, current_user)
    return LessonRead.model_validate(lesson)


@router.get("/my", response_model=Page[LessonRead])
async def list_my_lessons(
    pagination=Depends(get_pagination_params),
    service: LessonsService = Depends(get_lessons_service),
    current_user=Depends(get_current_user),
) -> Page[LessonRead]:
    """List lessons for current user."""
    items, total = await service.list_lessons(current_user, pagination.limit, pagination.offset)
    serialized = [LessonRead.model_validate(item) for item in items]
    return build_page(serialized, total, pagination)
