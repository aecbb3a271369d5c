"""Dua schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from tutorhub.core.enums import DuaBlockTypeEnum


class DuaBlockCreate(BaseModel):
    block_type: DuaBlockTypeEnum
    arabic_text: str = Field(min_length=1)
    transliteration: str = ""
    english_translation: str = ""
    source: str | None = Field(default=None, max_length=255)
    allah_names: list[str] = Field(default_factory=list)
    is_core: bool = False
    display_order: int = 0


class DuaBlockRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    block_type: DuaBlockTypeEnum
    arabic_text: str
    transliteration: str
    english_translation: str
    source: str | None
    allah_names: list[str]
    is_core: bool
    display_order: int


class CustomBlockTextIn(BaseModel):
    text: str = Field(min_length=1, max_length=2000)
    transliteration: str | None = Field(default=None, max_length=2000)


class CompositionInput(BaseModel):
    """Block picks and custom texts of a composition."""

    hamd_block_id: UUID | None = None
    salawat_block_id: UUID | None = None
    admission_block_id: UUID | None = None
    request_block_ids: list[UUID] = Field(default_factory=list)
    others_block_id: UUID | None = None
    closing_block_id: UUID | None = None
    custom_blocks: dict[DuaBlockTypeEnum, CustomBlockTextIn] = Field(default_factory=dict)
    custom_text: str = Field(default="", max_length=4000)


class CompositionSave(CompositionInput):
    title: str = Field(default="", max_length=255)
    is_favorite: bool = False


class CompositionPreview(BaseModel):
    arabic: str
    transliteration: str
    english: str
    allah_names: list[str]
    progress: int
    is_complete: bool
    missing_blocks: list[DuaBlockTypeEnum]


class UserDuaCompositionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    hamd_block_id: UUID | None
    salawat_block_id: UUID | None
    admission_block_id: UUID | None
    request_block_ids: list[UUID]
    others_block_id: UUID | None
    closing_block_id: UUID | None
    custom_text: str | None
    custom_blocks: dict
    is_favorite: bool
    created_at: datetime
