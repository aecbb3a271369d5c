"""Billing schemas."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from tutorhub.core.enums import CreditTransactionTypeEnum


class BalancesRead(BaseModel):
    """Current spendable balances of a user."""

    referral_balance: Decimal
    credits_remaining: int


class CreditGrant(BaseModel):
    """Admin request to add purchased lesson credits."""

    user_id: UUID
    credits: int = Field(ge=1, le=500)
    description: str = Field(default="Credit purchase", max_length=255)


class CreditTransactionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    transaction_type: CreditTransactionTypeEnum
    credits_amount: int
    credits_after: int
    description: str
    created_at: datetime
