"""Dua ORM models."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy import Enum as SAEnum
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from tutorhub.core.database import Base, BaseModelMixin
from tutorhub.core.enums import DuaBlockTypeEnum


class DuaBlock(BaseModelMixin, Base):
    """Catalog building block for composed duas."""

    __tablename__ = "dua_blocks"

    block_type: Mapped[DuaBlockTypeEnum] = mapped_column(
        SAEnum(DuaBlockTypeEnum, name="dua_block_type_enum", native_enum=False),
        nullable=False,
        index=True,
    )
    arabic_text: Mapped[str] = mapped_column(Text, nullable=False)
    transliteration: Mapped[str] = mapped_column(Text, default="", nullable=False)
    english_translation: Mapped[str] = mapped_column(Text, default="", nullable=False)
    source: Mapped[str | None] = mapped_column(String(255), nullable=True)
    allah_names: Mapped[list] = mapped_column(JSONB, default=list, nullable=False)
    is_core: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    display_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)


class UserDuaComposition(BaseModelMixin, Base):
    """Saved composition of a user."""

    __tablename__ = "user_dua_compositions"

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    hamd_block_id: Mapped[UUID | None] = mapped_column(ForeignKey("dua_blocks.id", ondelete="SET NULL"), nullable=True)
    salawat_block_id: Mapped[UUID | None] = mapped_column(ForeignKey("dua_blocks.id", ondelete="SET NULL"), nullable=True)
    admission_block_id: Mapped[UUID | None] = mapped_column(ForeignKey("dua_blocks.id", ondelete="SET NULL"), nullable=True)
    request_block_ids: Mapped[list] = mapped_column(JSONB, default=list, nullable=False)
    others_block_id: Mapped[UUID | None] = mapped_column(ForeignKey("dua_blocks.id", ondelete="SET NULL"), nullable=True)
    closing_block_id: Mapped[UUID | None] = mapped_column(ForeignKey("dua_blocks.id", ondelete="SET NULL"), nullable=True)
    custom_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    custom_blocks: Mapped[dict] = mapped_column(JSONB, default=dict, nullable=False)
    is_favorite: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
