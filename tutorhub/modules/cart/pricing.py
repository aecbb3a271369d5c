"""Cart totals, block discount and expiry notifications."""

from __future__ import annotations

from collections.abc import Collection, Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from uuid import UUID

from tutorhub.core.enums import LessonTierEnum
from tutorhub.shared.utils import to_money

UNKNOWN_TEACHER = "Unknown Teacher"
UNKNOWN_SUBJECT = "Unknown Subject"
EXPIRING_SOON = "expiring_soon"
ZERO = Decimal("0.00")


@dataclass(frozen=True, slots=True)
class CartLine:
    """Cart item joined with teacher and subject display names."""

    id: UUID
    user_id: UUID
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


@dataclass(frozen=True, slots=True)
class CartSummary:
    items: tuple[CartLine, ...]
    subtotal: Decimal
    discount: Decimal
    final_price: Decimal

    @property
    def count(self) -> int:
        return len(self.items)


@dataclass(frozen=True, slots=True)
class ExpiryNotification:
    id: UUID
    teacher_name: str
    scheduled_time: datetime
    expires_at: datetime
    type: str = EXPIRING_SOON


def block_discount(count: int, block_size: int = 10, block_amount: Decimal = Decimal("15.00")) -> Decimal:
    """Flat credit of ``block_amount`` for every full block of ``block_size`` lessons."""
    return to_money((count // block_size) * block_amount)


def summarize_cart(
    items: Sequence[CartLine],
    block_size: int = 10,
    block_amount: Decimal = Decimal("15.00"),
) -> CartSummary:
    subtotal = to_money(sum((item.price for item in items), ZERO))
    discount = block_discount(len(items), block_size, block_amount)
    return CartSummary(
        items=tuple(items),
        subtotal=subtotal,
        discount=discount,
        final_price=max(ZERO, subtotal - discount),
    )


def default_price(duration_minutes: int, price_30: Decimal, price_60: Decimal) -> Decimal:
    return to_money(price_60 if duration_minutes == 60 else price_30)


def expiring_notifications(
    items: Iterable[CartLine],
    now: datetime,
    warning_window: timedelta,
    dismissed: Collection[UUID] = (),
) -> list[ExpiryNotification]:
    """Items expiring within ``warning_window`` that the caller has not dismissed."""
    horizon = now + warning_window
    return [
        ExpiryNotification(
            id=item.id,
            teacher_name=item.teacher_name or UNKNOWN_TEACHER,
            scheduled_time=item.scheduled_time,
            expires_at=item.expires_at,
        )
        for item in items
        if now < item.expires_at <= horizon and item.id not in dismissed
    ]
