"""Dua repository layer."""

from __future__ import annotations

from collections.abc import Collection
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tutorhub.core.enums import DuaBlockTypeEnum
from tutorhub.modules.duas.models import DuaBlock, UserDuaComposition


class DuasRepository:
    """DB access for dua blocks and saved compositions."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_blocks(self, block_type: DuaBlockTypeEnum | None) -> list[DuaBlock]:
        stmt = select(DuaBlock)
        if block_type is not None:
            stmt = stmt.where(DuaBlock.block_type == block_type)
        stmt = stmt.order_by(DuaBlock.block_type.asc(), DuaBlock.display_order.asc())
        return (await self.session.scalars(stmt)).all()

    async def get_blocks_by_ids(self, block_ids: Collection[UUID]) -> list[DuaBlock]:
        if not block_ids:
            return []
        stmt = select(DuaBlock).where(DuaBlock.id.in_(list(block_ids)))
        return (await self.session.scalars(stmt)).all()

    async def create_block(self, **values) -> DuaBlock:
        block = DuaBlock(**values)
        self.session.add(block)
        await self.session.flush()
        return block

    async def create_composition(self, **values) -> UserDuaComposition:
        composition = UserDuaComposition(**values)
        self.session.add(composition)
        await self.session.flush()
        return composition

    async def list_compositions(
        self,
        user_id: UUID,
        limit: int,
        offset: int,
    ) -> tuple[list[UserDuaComposition], int]:
        base_stmt: Select[tuple[UserDuaComposition]] = select(UserDuaComposition).where(
            UserDuaComposition.user_id == user_id,
        )
        count_stmt = select(func.count()).select_from(base_stmt.subquery())
        total = int((await self.session.scalar(count_stmt)) or 0)

        stmt = base_stmt.order_by(UserDuaComposition.created_at.desc()).limit(limit).offset(offset)
        items = (await self.session.scalars(stmt)).all()
        return items, total
