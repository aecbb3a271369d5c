"""Identity repository layer."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from tutorhub.core.enums import RoleEnum
from tutorhub.modules.identity.models import Learner, Role, User


class IdentityRepository:
    """DB operations for identity domain."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_role_by_name(self, role_name: RoleEnum) -> Role | None:
        stmt = select(Role).where(Role.name == role_name)
        return await self.session.scalar(stmt)

    async def create_role(self, role_name: RoleEnum) -> Role:
        role = Role(name=role_name)
        self.session.add(role)
        await self.session.flush()
        return role

    async def get_user_by_id(self, user_id: UUID) -> User | None:
        stmt = select(User).options(selectinload(User.role)).where(User.id == user_id)
        return await self.session.scalar(stmt)

    async def get_learner_for_parent(self, parent_id: UUID) -> Learner | None:
        stmt = (
            select(Learner)
            .where(Learner.parent_id == parent_id)
            .order_by(Learner.created_at.asc())
            .limit(1)
        )
        return await self.session.scalar(stmt)

    async def create_learner(self, parent_id: UUID, name: str) -> Learner:
        learner = Learner(parent_id=parent_id, name=name)
        self.session.add(learner)
        await self.session.flush()
        return learner
