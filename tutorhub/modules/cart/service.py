"""Cart business logic layer."""

from __future__ import annotations

import logging
from collections.abc import Collection
from datetime import timedelta
from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tutorhub.core.config import get_settings
from tutorhub.core.database import get_db_session
from tutorhub.modules.cart.pricing import (
    CartSummary,
    ExpiryNotification,
    default_price,
    expiring_notifications,
    summarize_cart,
)
from tutorhub.modules.cart.repository import CartRepository
from tutorhub.modules.cart.schemas import CartItemCreate
from tutorhub.modules.identity.models import User
from tutorhub.shared.exceptions import ConflictException, NotFoundException, ValidationException
from tutorhub.shared.utils import ensure_utc, to_money, utc_now

logger = logging.getLogger(__name__)
settings = get_settings()


class CartService:
    """Per-user cart of time-limited slot reservations."""

    def __init__(self, repository: CartRepository) -> None:
        self.repository = repository

    async def refresh_cart(self, user: User) -> CartSummary:
        """Current non-expired items with totals; no writes."""
        lines = await self.repository.list_active_lines(user.id, utc_now())
        return summarize_cart(lines, settings.block_discount_size, settings.block_discount_amount)

    async def get_cart(
        self,
        user: User,
        dismissed: Collection[UUID] = (),
    ) -> tuple[CartSummary, list[ExpiryNotification]]:
        """Refresh cart and compute expiry warnings minus dismissed ids."""
        now = utc_now()
        lines = await self.repository.list_active_lines(user.id, now)
        summary = summarize_cart(lines, settings.block_discount_size, settings.block_discount_amount)
        notifications = expiring_notifications(
            summary.items,
            now,
            timedelta(minutes=settings.cart_expiry_warning_minutes),
            set(dismissed),
        )
        return summary, notifications

    async def add_to_cart(self, payload: CartItemCreate, user: User) -> CartSummary:
        """Reserve a future slot for ``cart_item_ttl_minutes``."""
        now = utc_now()
        scheduled_time = ensure_utc(payload.scheduled_time)
        if scheduled_time <= now:
            raise ValidationException("Cannot book a time slot in the past. Please select a future time.")

        await self.repository.lock_user_cart(user.id)
        existing = await self.repository.find_active_item(user.id, payload.teacher_id, scheduled_time, now)
        if existing is not None:
            raise ConflictException("This time slot is already in your cart")

        price = payload.price
        if price is None:
            price = default_price(payload.duration_minutes, settings.lesson_price_30, settings.lesson_price_60)

        item = await self.repository.create_item(
            user_id=user.id,
            teacher_id=payload.teacher_id,
            subject_id=payload.subject_id,
            scheduled_time=scheduled_time,
            duration_minutes=payload.duration_minutes,
            price=to_money(price),
            lesson_tier=payload.lesson_tier,
            created_at=now,
            expires_at=now + timedelta(minutes=settings.cart_item_ttl_minutes),
        )
        logger.info("Cart item %s added for user %s (teacher=%s)", item.id, user.id, payload.teacher_id)
        return await self.refresh_cart(user)

    async def toggle_slot(self, payload: CartItemCreate, user: User) -> tuple[bool, CartSummary]:
        """Add the slot, or remove it when it is already in the cart."""
        await self.repository.lock_user_cart(user.id)
        existing = await self.repository.find_active_item(
            user.id,
            payload.teacher_id,
            ensure_utc(payload.scheduled_time),
            utc_now(),
        )
        if existing is None:
            return True, await self.add_to_cart(payload, user)

        await self.repository.delete_item(existing)
        return False, await self.refresh_cart(user)

    async def remove_from_cart(self, item_id: UUID, user: User) -> CartSummary:
        item = await self.repository.get_item_by_id(item_id)
        if item is None or item.user_id != user.id:
            raise NotFoundException("Cart item not found")
        await self.repository.delete_item(item)
        return await self.refresh_cart(user)

    async def clear_cart(self, user: User) -> int:
        removed = await self.repository.delete_items_for_user(user.id)
        logger.info("Cleared %s cart item(s) for user %s", removed, user.id)
        return removed


async def get_cart_service(session: AsyncSession = Depends(get_db_session)) -> CartService:
    """Dependency provider for cart service."""
    return CartService(CartRepository(session))
