"""Dua API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from tutorhub.core.enums import DuaBlockTypeEnum
from tutorhub.modules.duas.schemas import (
    CompositionInput,
    CompositionPreview,
    CompositionSave,
    DuaBlockCreate,
    DuaBlockRead,
    UserDuaCompositionRead,
)
from tutorhub.modules.duas.service import DuasService, get_duas_service
from tutorhub.modules.identity.service import get_current_user
from tutorhub.shared.pagination import Page, build_page, get_pagination_params

router = APIRouter(prefix="/duas", tags=["duas"])


@router.get("/blocks", response_model=list[DuaBlockRead])
async def list_blocks(
    block_type: DuaBlockTypeEnum | None = Query(default=None),
    service: DuasService = Depends(get_duas_service),
) -> list[DuaBlockRead]:
    """Dua block catalog."""
    return [DuaBlockRead.model_validate(item) for item in await service.list_blocks(block_type)]


@router.post("/blocks", response_model=DuaBlockRead, status_code=status.HTTP_201_CREATED)
async def create_block(
    payload: DuaBlockCreate,
    service: DuasService = Depends(get_duas_service),
    current_user=Depends(get_current_user),
) -> DuaBlockRead:
    return DuaBlockRead.model_validate(await service.create_block(payload, current_user))


@router.post("/compose", response_model=CompositionPreview)
async def preview_composition(
    payload: CompositionInput,
    service: DuasService = Depends(get_duas_service),
) -> CompositionPreview:
    """Composed texts and progress for the given picks."""
    return await service.preview(payload)


@router.post("/compositions", response_model=UserDuaCompositionRead, status_code=status.HTTP_201_CREATED)
async def save_composition(
    payload: CompositionSave,
    service: DuasService = Depends(get_duas_service),
    current_user=Depends(get_current_user),
) -> UserDuaCompositionRead:
    """Save complete composition to My Duas."""
    composition = await service.save_composition(payload, current_user)
    return UserDuaCompositionRead.model_validate(composition)


@router.get("/compositions/my", response_model=Page[UserDuaCompositionRead])
async def list_my_compositions(
    pagination=Depends(get_pagination_params),
    service: DuasService = Depends(get_duas_service),
    current_user=Depends(get_current_user),
) -> Page[UserDuaCompositionRead]:
    items, total = await service.list_compositions(current_user, pagination.limit, pagination.offset)
    serialized = [UserDuaCompositionRead.model_validate(item) for item in items]
    return build_page(serialized, total, pagination)
