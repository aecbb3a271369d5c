"""Billing business logic layer."""

from __future__ import annotations

from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tutorhub.core.database import get_db_session
from tutorhub.core.enums import CreditTransactionTypeEnum, RoleEnum
from tutorhub.modules.audit.repository import AuditRepository
from tutorhub.modules.billing.models import CreditTransaction, UserCredit
from tutorhub.modules.billing.repository import BillingRepository
from tutorhub.modules.billing.schemas import BalancesRead, CreditGrant
from tutorhub.modules.identity.models import User
from tutorhub.shared.exceptions import UnauthorizedException


class BillingService:
    """Referral balance and lesson credit bookkeeping."""

    def __init__(
        self,
        repository: BillingRepository,
        audit_repository: AuditRepository,
    ) -> None:
        self.repository = repository
        self.audit_repository = audit_repository

    async def get_balances(self, user_id: UUID) -> BalancesRead:
        return BalancesRead(
            referral_balance=await self.repository.get_referral_balance(user_id),
            credits_remaining=await self.repository.get_credit_balance(user_id),
        )

    async def grant_credits(self, payload: CreditGrant, actor: User) -> UserCredit:
        """Add purchased credits to a user (admin only)."""
        if actor.role.name != RoleEnum.ADMIN:
            raise UnauthorizedException("Only admin can grant credits")

        row = await self.repository.get_user_credit_for_update(payload.user_id)
        if row is None:
            row = await self.repository.create_user_credit(payload.user_id)
        row = await self.repository.set_credits(row, row.credits_remaining + payload.credits)

        await self.repository.create_credit_transaction(
            user_id=payload.user_id,
            transaction_type=CreditTransactionTypeEnum.PURCHASE,
            credits_amount=payload.credits,
            credits_after=row.credits_remaining,
            description=payload.description,
        )
        await self.audit_repository.create_audit_log(
            actor_id=actor.id,
            action="billing.credits.grant",
            entity_type="user_credits",
            entity_id=str(row.id),
            payload={"user_id": str(payload.user_id), "credits": payload.credits},
        )
        return row

    async def list_transactions(
        self,
        user_id: UUID,
        actor: User,
        limit: int,
        offset: int,
    ) -> tuple[list[CreditTransaction], int]:
        if actor.role.name != RoleEnum.ADMIN and actor.id != user_id:
            raise UnauthorizedException("Access denied")
        return await self.repository.list_credit_transactions(user_id, limit, offset)


async def get_billing_service(session: AsyncSession = Depends(get_db_session)) -> BillingService:
    """Dependency provider for billing service."""
    return BillingService(
        repository=BillingRepository(session),
        audit_repository=AuditRepository(session),
    )
