"""Billing ORM models."""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from sqlalchemy import CheckConstraint, ForeignKey, Integer, Numeric, String
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from tutorhub.core.database import Base, BaseModelMixin
from tutorhub.core.enums import CreditTransactionTypeEnum


class ReferralCredit(BaseModelMixin, Base):
    """Monetary referral balance, spent automatically at checkout."""

    __tablename__ = "referral_credits"
    __table_args__ = (CheckConstraint("balance >= 0", name="balance_non_negative"),)

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    balance: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0.00"), nullable=False)


class UserCredit(BaseModelMixin, Base):
    """Prepaid lesson credits; one credit pays for one lesson."""

    __tablename__ = "user_credits"
    __table_args__ = (CheckConstraint("credits_remaining >= 0", name="credits_non_negative"),)

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    credits_remaining: Mapped[int] = mapped_column(Integer, default=0, nullable=False)


class CreditTransaction(BaseModelMixin, Base):
    """Ledger entry for credit purchases, spends and refunds."""

    __tablename__ = "credit_transactions"

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    transaction_type: Mapped[CreditTransactionTypeEnum] = mapped_column(
        SAEnum(CreditTransactionTypeEnum, name="credit_transaction_type_enum", native_enum=False),
        nullable=False,
    )
    credits_amount: Mapped[int] = mapped_column(Integer, nullable=False)
    credits_after: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str] = mapped_column(String(255), default="", nullable=False)
