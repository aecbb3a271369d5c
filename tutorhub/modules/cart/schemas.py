"""Cart schemas."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from tutorhub.core.enums import LessonTierEnum
from tutorhub.modules.cart.pricing import CartSummary, ExpiryNotification


class CartItemCreate(BaseModel):
    """Add slot to cart request; price defaults by duration when omitted."""

    teacher_id: UUID
    subject_id: UUID | None = None
    scheduled_time: datetime
    duration_minutes: Literal[30, 60] = 30
    price: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    lesson_tier: LessonTierEnum = LessonTierEnum.PREMIUM


class CartItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    teacher_id: UUID
    teacher_name: str
    subject_id: UUID | None
    subject_name: str
    scheduled_time: datetime
    duration_minutes: int
    price: Decimal
    lesson_tier: LessonTierEnum
    created_at: datetime
    expires_at: datetime


class ExpiryNotificationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    teacher_name: str
    scheduled_time: datetime
    expires_at: datetime
    type: str


class CartRead(BaseModel):
    """Cart contents with derived totals."""

    items: list[CartItemRead]
    count: int
    subtotal: Decimal
    discount: Decimal
    final_price: Decimal
    notifications: list[ExpiryNotificationRead] = Field(default_factory=list)

    @classmethod
    def from_summary(
        cls,
        summary: CartSummary,
        notifications: list[ExpiryNotification] | None = None,
    ) -> "CartRead":
        return cls(
            items=[CartItemRead.model_validate(item) for item in summary.items],
            count=summary.count,
            subtotal=summary.subtotal,
            discount=summary.discount,
            final_price=summary.final_price,
            notifications=[ExpiryNotificationRead.model_validate(item) for item in notifications or []],
        )


class CartToggleRead(BaseModel):
    added: bool
    cart: CartRead
