"""Teachers repository layer."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tutorhub.modules.teachers.models import Subject, TeacherProfile


class TeachersRepository:
    """DB operations for teacher profiles and subjects."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_profile(self, user_id: UUID, display_name: str, bio: str) -> TeacherProfile:
        profile = TeacherProfile(user_id=user_id, display_name=display_name, bio=bio)
        self.session.add(profile)
        await self.session.flush()
        return profile

    async def get_profile_by_user_id(self, user_id: UUID) -> TeacherProfile | None:
        stmt = select(TeacherProfile).where(TeacherProfile.user_id == user_id)
        return await self.session.scalar(stmt)

    async def list_profiles(
        self,
        limit: int,
        offset: int,
        approved_only: bool,
    ) -> tuple[list[TeacherProfile], int]:
        base_stmt: Select[tuple[TeacherProfile]] = select(TeacherProfile)
        if approved_only:
            base_stmt = base_stmt.where(TeacherProfile.is_approved.is_(True))

        count_stmt = select(func.count()).select_from(base_stmt.subquery())
        total = int((await self.session.scalar(count_stmt)) or 0)

        stmt = base_stmt.order_by(TeacherProfile.display_name.asc()).limit(limit).offset(offset)
        items = (await self.session.scalars(stmt)).all()
        return items, total

    async def get_subject_by_id(self, subject_id: UUID) -> Subject | None:
        return await self.session.scalar(select(Subject).where(Subject.id == subject_id))

    async def get_subject_by_slug(self, slug: str) -> Subject | None:
        return await self.session.scalar(select(Subject).where(Subject.slug == slug))

    async def list_subjects(self) -> list[Subject]:
        stmt = select(Subject).where(Subject.is_active.is_(True)).order_by(Subject.name.asc())
        return (await self.session.scalars(stmt)).all()

    async def create_subject(self, slug: str, name: str) -> Subject:
        subject = Subject(slug=slug, name=name)
        self.session.add(subject)
        await self.session.flush()
        return subject
