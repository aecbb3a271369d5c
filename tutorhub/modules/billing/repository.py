"""Billing repository layer."""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tutorhub.core.enums import CreditTransactionTypeEnum
from tutorhub.modules.billing.models import CreditTransaction, ReferralCredit, UserCredit


class BillingRepository:
    """DB access methods for balances and the credit ledger."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def savepoint(self):
        """Nested transaction for bookkeeping that may fail on its own."""
        return self.session.begin_nested()

    async def get_referral_balance(self, user_id: UUID) -> Decimal:
        stmt = select(ReferralCredit.balance).where(ReferralCredit.user_id == user_id)
        return (await self.session.scalar(stmt)) or Decimal("0.00")

    async def debit_referral_balance(self, user_id: UUID, amount: Decimal) -> Decimal:
        """Subtract ``amount`` (capped at the balance); return the new balance."""
        stmt = select(ReferralCredit).where(ReferralCredit.user_id == user_id).with_for_update()
        row = await self.session.scalar(stmt)
        if row is None:
            return Decimal("0.00")
        row.balance = max(Decimal("0.00"), row.balance - amount)
        await self.session.flush()
        return row.balance

    async def get_credit_balance(self, user_id: UUID) -> int:
        stmt = select(UserCredit.credits_remaining).where(UserCredit.user_id == user_id)
        return int((await self.session.scalar(stmt)) or 0)

    async def get_user_credit_for_update(self, user_id: UUID) -> UserCredit | None:
        stmt = select(UserCredit).where(UserCredit.user_id == user_id).with_for_update()
        return await self.session.scalar(stmt)

    async def create_user_credit(self, user_id: UUID) -> UserCredit:
        row = UserCredit(user_id=user_id, credits_remaining=0)
        self.session.add(row)
        await self.session.flush()
        return row

    async def set_credits(self, row: UserCredit, credits_remaining: int) -> UserCredit:
        row.credits_remaining = credits_remaining
        await self.session.flush()
        return row

    async def create_credit_transaction(
        self,
        user_id: UUID,
        transaction_type: CreditTransactionTypeEnum,
        credits_amount: int,
        credits_after: int,
        description: str,
    ) -> CreditTransaction:
        entry = CreditTransaction(
            user_id=user_id,
            transaction_type=transaction_type,
            credits_amount=credits_amount,
            credits_after=credits_after,
            description=description,
        )
        self.session.add(entry)
        await self.session.flush()
        return entry

    async def list_credit_transactions(
        self,
        user_id: UUID,
        limit: int,
        offset: int,
    ) -> tuple[list[CreditTransaction], int]:
        base_stmt: Select[tuple[CreditTransaction]] = select(CreditTransaction).where(
            CreditTransaction.user_id == user_id,
        )
        count_stmt = select(func.count()).select_from(base_stmt.subquery())
        total = int((await self.session.scalar(count_stmt)) or 0)

        stmt = base_stmt.order_by(CreditTransaction.created_at.desc()).limit(limit).offset(offset)
        items = (await self.session.scalars(stmt)).all()
        return items, total
