"""Teachers business logic layer."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tutorhub.core.database import get_db_session
from tutorhub.core.enums import RoleEnum
from tutorhub.modules.identity.models import User
from tutorhub.modules.teachers.models import Subject, TeacherProfile
from tutorhub.modules.teachers.repository import TeachersRepository
from tutorhub.modules.teachers.schemas import SubjectCreate, TeacherProfileCreate
from tutorhub.shared.exceptions import ConflictException, UnauthorizedException


class TeachersService:
    """Teachers domain service."""

    def __init__(self, repository: TeachersRepository) -> None:
        self.repository = repository

    async def create_profile(self, payload: TeacherProfileCreate, actor: User) -> TeacherProfile:
        """Create teacher profile (admin or the teacher themselves)."""
        if actor.role.name != RoleEnum.ADMIN and actor.id != payload.user_id:
            raise UnauthorizedException("Only admin or owner can create profile")

        existing = await self.repository.get_profile_by_user_id(payload.user_id)
        if existing is not None:
            raise ConflictException("Teacher profile already exists for user")

        return await self.repository.create_profile(
            user_id=payload.user_id,
            display_name=payload.display_name,
            bio=payload.bio,
        )

    async def list_profiles(self, limit: int, offset: int) -> tuple[list[TeacherProfile], int]:
        """List approved teachers for the booking catalog."""
        return await self.repository.list_profiles(limit=limit, offset=offset, approved_only=True)

    async def list_subjects(self) -> list[Subject]:
        return await self.repository.list_subjects()

    async def create_subject(self, payload: SubjectCreate, actor: User) -> Subject:
        if actor.role.name != RoleEnum.ADMIN:
            raise UnauthorizedException("Only admin can create subjects")
        if await self.repository.get_subject_by_slug(payload.slug) is not None:
            raise ConflictException("Subject with this slug already exists")
        return await self.repository.create_subject(payload.slug, payload.name)


async def get_teachers_service(session: AsyncSession = Depends(get_db_session)) -> TeachersService:
    """Dependency provider for teachers service."""
    return TeachersService(TeachersRepository(session))
