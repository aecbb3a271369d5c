"""Billing API router."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status

from tutorhub.modules.billing.schemas import BalancesRead, CreditGrant, CreditTransactionRead
from tutorhub.modules.billing.service import BillingService, get_billing_service
from tutorhub.modules.identity.service import get_current_user
from tutorhub.shared.pagination import Page, build_page, get_pagination_params

router = APIRouter(prefix="/billing", tags=["billing"])


@router.get("/balances/me", response_model=BalancesRead)
async def get_my_balances(
    service: BillingService = Depends(get_billing_service),
    current_user=Depends(get_current_user),
) -> BalancesRead:
    """Referral balance and remaining lesson credits."""
    return await service.get_balances(current_user.id)


@router.post("/credits/grant", response_model=BalancesRead, status_code=status.HTTP_201_CREATED)
async def grant_credits(
    payload: CreditGrant,
    service: BillingService = Depends(get_billing_service),
    current_user=Depends(get_current_user),
) -> BalancesRead:
    """Add purchased credits to a user."""
    await service.grant_credits(payload, current_user)
    return await service.get_balances(payload.user_id)


@router.get("/credits/{user_id}/transactions", response_model=Page[CreditTransactionRead])
async def list_credit_transactions(
    user_id: UUID,
    pagination=Depends(get_pagination_params),
    service: BillingService = Depends(get_billing_service),
    current_user=Depends(get_current_user),
) -> Page[CreditTransactionRead]:
    """Credit ledger of a user."""
    items, total = await service.list_transactions(user_id, current_user, pagination.limit, pagination.offset)
    serialized = [CreditTransactionRead.model_validate(item) for item in items]
    return build_page(serialized, total, pagination)
