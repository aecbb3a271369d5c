"""Checkout API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from tutorhub.integrations.edge_functions import EdgeFunctionsClient, get_edge_functions_client
from tutorhub.modules.checkout.schemas import CheckoutQuoteRead, CheckoutRequest, CheckoutResultRead
from tutorhub.modules.checkout.service import CheckoutService, get_checkout_service
from tutorhub.modules.identity.service import get_current_user

router = APIRouter(prefix="/checkout", tags=["checkout"])


@router.post("/quote", response_model=CheckoutQuoteRead)
async def quote_checkout(
    payload: CheckoutRequest,
    service: CheckoutService = Depends(get_checkout_service),
    current_user=Depends(get_current_user),
) -> CheckoutQuoteRead:
    """Price current cart with promo, referral and credits applied."""
    quote = await service.quote(payload, current_user)
    return CheckoutQuoteRead.model_validate(quote)


@router.post("", response_model=CheckoutResultRead)
async def checkout(
    payload: CheckoutRequest,
    service: CheckoutService = Depends(get_checkout_service),
    client: EdgeFunctionsClient = Depends(get_edge_functions_client),
    current_user=Depends(get_current_user),
) -> CheckoutResultRead:
    """Book current cart."""
    result = await service.checkout(payload, current_user, client)
    return CheckoutResultRead.model_validate(result)
