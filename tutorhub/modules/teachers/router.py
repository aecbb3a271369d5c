"""Teachers API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from tutorhub.modules.identity.service import get_current_user
from tutorhub.modules.teachers.schemas import (
    SubjectCreate,
    SubjectRead,
    TeacherProfileCreate,
    TeacherProfileRead,
)
from tutorhub.modules.teachers.service import TeachersService, get_teachers_service
from tutorhub.shared.pagination import Page, build_page, get_pagination_params

router = APIRouter(prefix="/teachers", tags=["teachers"])


@router.post("/profiles", response_model=TeacherProfileRead, status_code=status.HTTP_201_CREATED)
async def create_profile(
    payload: TeacherProfileCreate,
    service: TeachersService = Depends(get_teachers_service),
    current_user=Depends(get_current_user),
) -> TeacherProfileRead:
    """Create teacher profile."""
    profile = await service.create_profile(payload, current_user)
    return TeacherProfileRead.model_validate(profile)


@router.get("/profiles", response_model=Page[TeacherProfileRead])
async def list_profiles(
    pagination=Depends(get_pagination_params),
    service: TeachersService = Depends(get_teachers_service),
) -> Page[TeacherProfileRead]:
    """List approved teacher profiles."""
    items, total = await service.list_profiles(pagination.limit, pagination.offset)
    serialized = [TeacherProfileRead.model_validate(item) for item in items]
    return build_page(serialized, total, pagination)


@router.get("/subjects", response_model=list[SubjectRead])
async def list_subjects(service: TeachersService = Depends(get_teachers_service)) -> list[SubjectRead]:
    """List bookable subjects."""
    return [SubjectRead.model_validate(item) for item in await service.list_subjects()]


@router.post("/subjects", response_model=SubjectRead, status_code=status.HTTP_201_CREATED)
async def create_subject(
    payload: SubjectCreate,
    service: TeachersService = Depends(get_teachers_service),
    current_user=Depends(get_current_user),
) -> SubjectRead:
    """Create subject (admin)."""
    subject = await service.create_subject(payload, current_user)
    return SubjectRead.model_validate(subject)
