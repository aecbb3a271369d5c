"""Checkout schemas."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from tutorhub.core.enums import CheckoutOutcomeEnum, PaymentMethodEnum


class CheckoutRequest(BaseModel):
    """Quote or checkout request for the current cart."""

    promo_code: str | None = Field(default=None, max_length=64)
    payment_method: PaymentMethodEnum | None = None


class CheckoutQuoteRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    item_count: int
    subtotal: Decimal
    block_discount: Decimal
    final_price: Decimal
    promo_code: str | None
    promo_discount: Decimal
    referral_discount: Decimal
    total_discount: Decimal
    amount_due: Decimal
    credit_balance: int
    can_use_credits: bool
    payment_method: PaymentMethodEnum
    outcome: CheckoutOutcomeEnum
    charges: list[Decimal]


class CheckoutResultRead(BaseModel):
    """Checkout outcome; card checkouts carry the hosted payment URL."""

    model_config = ConfigDict(from_attributes=True)

    outcome: CheckoutOutcomeEnum
    quote: CheckoutQuoteRead
    lessons: list[dict[str, Any]] = Field(default_factory=list)
    message: str | None = None
    checkout_url: str | None = None
    session_id: str | None = None
    pending_booking_id: str | None = None
    credits_remaining: int | None = None
