"""Cart repository layer."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from tutorhub.core.enums import LessonTierEnum
from tutorhub.modules.cart.models import CartItem
from tutorhub.modules.cart.pricing import UNKNOWN_SUBJECT, UNKNOWN_TEACHER, CartLine
from tutorhub.modules.identity.models import User
from tutorhub.modules.teachers.models import Subject, TeacherProfile


class CartRepository:
    """DB operations for cart items."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_item(
        self,
        user_id: UUID,
        teacher_id: UUID,
        subject_id: UUID | None,
        scheduled_time: datetime,
        duration_minutes: int,
        price: Decimal,
        lesson_tier: LessonTierEnum,
        created_at: datetime,
        expires_at: datetime,
    ) -> CartItem:
        item = CartItem(
            user_id=user_id,
            teacher_id=teacher_id,
            subject_id=subject_id,
            scheduled_time=scheduled_time,
            duration_minutes=duration_minutes,
            price=price,
            lesson_tier=lesson_tier,
            created_at=created_at,
            updated_at=created_at,
            expires_at=expires_at,
        )
        self.session.add(item)
        await self.session.flush()
        return item

    async def get_item_by_id(self, item_id: UUID) -> CartItem | None:
        stmt = select(CartItem).where(CartItem.id == item_id)
        return await self.session.scalar(stmt)

    async def lock_user_cart(self, user_id: UUID) -> None:
        """Row lock on the owner; serializes concurrent cart edits of one user."""
        await self.session.execute(select(User.id).where(User.id == user_id).with_for_update())

    async def find_active_item(
        self,
        user_id: UUID,
        teacher_id: UUID,
        scheduled_time: datetime,
        now: datetime,
    ) -> CartItem | None:
        stmt = select(CartItem).where(
            CartItem.user_id == user_id,
            CartItem.teacher_id == teacher_id,
            CartItem.scheduled_time == scheduled_time,
            CartItem.expires_at > now,
        )
        return await self.session.scalar(stmt)

    async def list_active_lines(self, user_id: UUID, now: datetime) -> list[CartLine]:
        """Non-expired items ordered by lesson time, with display names."""
        stmt = (
            select(CartItem, TeacherProfile.display_name, User.full_name, Subject.name)
            .outerjoin(TeacherProfile, TeacherProfile.user_id == CartItem.teacher_id)
            .outerjoin(User, User.id == CartItem.teacher_id)
            .outerjoin(Subject, Subject.id == CartItem.subject_id)
            .where(CartItem.user_id == user_id, CartItem.expires_at > now)
            .order_by(CartItem.scheduled_time.asc(), CartItem.created_at.asc())
        )
        rows = (await self.session.execute(stmt)).all()
        return [
            CartLine(
                id=item.id,
                user_id=item.user_id,
                teacher_id=item.teacher_id,
                teacher_name=display_name or full_name or UNKNOWN_TEACHER,
                subject_id=item.subject_id,
                subject_name=subject_name or UNKNOWN_SUBJECT,
                scheduled_time=item.scheduled_time,
                duration_minutes=item.duration_minutes,
                price=item.price,
                lesson_tier=item.lesson_tier or LessonTierEnum.PREMIUM,
                created_at=item.created_at,
                expires_at=item.expires_at,
            )
            for item, display_name, full_name, subject_name in rows
        ]

    async def delete_item(self, item: CartItem) -> None:
        await self.session.delete(item)
        await self.session.flush()

    async def delete_items_for_user(self, user_id: UUID) -> int:
        result = await self.session.execute(delete(CartItem).where(CartItem.user_id == user_id))
        return int(result.rowcount or 0)
