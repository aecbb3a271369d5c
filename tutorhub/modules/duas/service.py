"""Dua business logic layer."""

from __future__ import annotations

from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tutorhub.core.database import get_db_session
from tutorhub.core.enums import DuaBlockTypeEnum, RoleEnum
from tutorhub.modules.duas.composition import CatalogBlock, CustomBlockText, DuaComposition
from tutorhub.modules.duas.models import DuaBlock, UserDuaComposition
from tutorhub.modules.duas.repository import DuasRepository
from tutorhub.modules.duas.schemas import CompositionInput, CompositionPreview, CompositionSave, DuaBlockCreate
from tutorhub.modules.identity.models import User
from tutorhub.shared.exceptions import NotFoundException, UnauthorizedException, ValidationException

SINGLE_BLOCK_FIELDS: dict[DuaBlockTypeEnum, str] = {
    DuaBlockTypeEnum.HAMD: "hamd_block_id",
    DuaBlockTypeEnum.SALAWAT: "salawat_block_id",
    DuaBlockTypeEnum.ADMISSION: "admission_block_id",
    DuaBlockTypeEnum.OTHERS: "others_block_id",
    DuaBlockTypeEnum.CLOSING: "closing_block_id",
}


def to_catalog_block(block: DuaBlock) -> CatalogBlock:
    return CatalogBlock(
        id=str(block.id),
        block_type=block.block_type,
        arabic_text=block.arabic_text,
        transliteration=block.transliteration,
        english_translation=block.english_translation,
        allah_names=tuple(block.allah_names or ()),
    )


def preview_of(composition: DuaComposition) -> CompositionPreview:
    return CompositionPreview(
        arabic=composition.arabic_text(),
        transliteration=composition.transliteration(),
        english=composition.english(),
        allah_names=composition.allah_names(),
        progress=composition.progress,
        is_complete=composition.is_complete,
        missing_blocks=composition.missing_blocks(),
    )


class DuasService:
    """Dua catalog, composition preview and saved duas."""

    def __init__(self, repository: DuasRepository) -> None:
        self.repository = repository

    async def list_blocks(self, block_type: DuaBlockTypeEnum | None) -> list[DuaBlock]:
        return await self.repository.list_blocks(block_type)

    async def create_block(self, payload: DuaBlockCreate, actor: User) -> DuaBlock:
        if actor.role.name != RoleEnum.ADMIN:
            raise UnauthorizedException("Only admin can manage dua blocks")
        return await self.repository.create_block(**payload.model_dump())

    async def build_composition(self, payload: CompositionInput) -> DuaComposition:
        """Resolve block ids into a composition; each slot holds a block or custom text."""
        wanted: dict[UUID, DuaBlockTypeEnum] = {}
        for block_type, field_name in SINGLE_BLOCK_FIELDS.items():
            block_id = getattr(payload, field_name)
            if block_id is None:
                continue
            if block_type in payload.custom_blocks:
                raise ValidationException(f"Choose either a block or custom text for {block_type.value}")
            wanted[block_id] = block_type
        for block_id in payload.request_block_ids:
            wanted[block_id] = DuaBlockTypeEnum.REQUEST

        blocks = {block.id: block for block in await self.repository.get_blocks_by_ids(wanted.keys())}
        composition = DuaComposition(custom_text=payload.custom_text.strip())
        for block_id, block_type in wanted.items():
            block = blocks.get(block_id)
            if block is None:
                raise NotFoundException(f"Dua block {block_id} not found")
            if block.block_type != block_type:
                raise ValidationException(f"Dua block {block_id} is not a {block_type.value} block")
            composition.select_block(to_catalog_block(block))

        for block_type, custom in payload.custom_blocks.items():
            composition.set_custom_text(
                block_type,
                CustomBlockText(text=custom.text.strip(), transliteration=custom.transliteration),
            )
        return composition

    async def preview(self, payload: CompositionInput) -> CompositionPreview:
        return preview_of(await self.build_composition(payload))

    async def save_composition(self, payload: CompositionSave, user: User) -> UserDuaComposition:
        """Persist a complete composition under a title."""
        title = payload.title.strip()
        if not title:
            raise ValidationException("Please enter a name for your dua")
        composition = await self.build_composition(payload)
        if not composition.is_complete:
            raise ValidationException("Please complete all blocks before saving")

        return await self.repository.create_composition(
            user_id=user.id,
            title=title,
            request_block_ids=[str(block_id) for block_id in payload.request_block_ids],
            custom_text=composition.custom_text or None,
            custom_blocks={
                block_type.value: custom.model_dump(exclude_none=True)
                for block_type, custom in payload.custom_blocks.items()
            },
            is_favorite=payload.is_favorite,
            **{field_name: getattr(payload, field_name) for field_name in SINGLE_BLOCK_FIELDS.values()},
        )

    async def list_compositions(self, user: User, limit: int, offset: int) -> tuple[list[UserDuaComposition], int]:
        return await self.repository.list_compositions(user.id, limit, offset)


async def get_duas_service(session: AsyncSession = Depends(get_db_session)) -> DuasService:
    """Dependency provider for duas service."""
    return DuasService(DuasRepository(session))
