"""Cart ORM models."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, Numeric
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from tutorhub.core.database import Base, BaseModelMixin
from tutorhub.core.enums import LessonTierEnum


class CartItem(BaseModelMixin, Base):
    """Time-limited slot reservation in a user's cart.

    Rows past ``expires_at`` are ignored on read and never swept.
    """

    __tablename__ = "cart_items"
    __table_args__ = (
        CheckConstraint("duration_minutes IN (30, 60)", name="duration_allowed"),
        CheckConstraint("price >= 0", name="price_non_negative"),
        Index("ix_cart_items_user_id_expires_at", "user_id", "expires_at"),
    )

    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    teacher_id: Mapped[UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    subject_id: Mapped[UUID | None] = mapped_column(ForeignKey("subjects.id", ondelete="SET NULL"), nullable=True)
    scheduled_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    lesson_tier: Mapped[LessonTierEnum] = mapped_column(
        SAEnum(LessonTierEnum, name="lesson_tier_enum", native_enum=False),
        default=LessonTierEnum.PREMIUM,
        nullable=False,
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
