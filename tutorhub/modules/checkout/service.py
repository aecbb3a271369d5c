"""Checkout business logic layer."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any
from uuid import UUID

from fastapi import Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tutorhub.core.config import get_settings
from tutorhub.core.database import get_db_session
from tutorhub.core.enums import CheckoutOutcomeEnum, CreditTransactionTypeEnum, PaymentMethodEnum
from tutorhub.core.metrics import record_checkout_outcome
from tutorhub.integrations.edge_functions import (
    BookingCartItem,
    CheckoutBooking,
    CreateBookingRequest,
    EdgeFunctionsClient,
    InitiateCheckoutRequest,
)
from tutorhub.modules.audit.repository import AuditRepository
from tutorhub.modules.billing.repository import BillingRepository
from tutorhub.modules.cart.pricing import CartLine, CartSummary, summarize_cart
from tutorhub.modules.cart.repository import CartRepository
from tutorhub.modules.checkout.reconciler import CheckoutQuote, build_quote, normalize_promo_code
from tutorhub.modules.checkout.schemas import CheckoutRequest
from tutorhub.modules.identity.models import User
from tutorhub.modules.identity.repository import IdentityRepository
from tutorhub.modules.lessons.repository import LessonsRepository
from tutorhub.shared.exceptions import BusinessRuleException, ValidationException
from tutorhub.shared.utils import utc_now

logger = logging.getLogger(__name__)
settings = get_settings()


@dataclass(slots=True)
class CheckoutResult:
    outcome: CheckoutOutcomeEnum
    quote: CheckoutQuote
    lessons: list[dict[str, Any]] = field(default_factory=list)
    message: str | None = None
    checkout_url: str | None = None
    session_id: str | None = None
    pending_booking_id: str | None = None
    credits_remaining: int | None = None


def _booking_items(
    lines: tuple[CartLine, ...],
    charges: tuple[Decimal, ...] | None = None,
) -> list[BookingCartItem]:
    """Booking payload for the cart; ``charges`` overrides each line's list price."""
    prices = charges if charges is not None else tuple(line.price for line in lines)
    return [
        BookingCartItem(
            id=line.id,
            teacher_id=line.teacher_id,
            subject_id=line.subject_id,
            scheduled_time=line.scheduled_time.isoformat(),
            duration_minutes=line.duration_minutes,
            price=price,
            lesson_tier=line.lesson_tier.value,
        )
        for line, price in zip(lines, prices, strict=True)
    ]


def _checkout_bookings(lines: tuple[CartLine, ...], charges: tuple[Decimal, ...]) -> list[CheckoutBooking]:
    return [
        CheckoutBooking(
            teacher_id=line.teacher_id,
            subject_id=line.subject_id,
            date=line.scheduled_time.date().isoformat(),
            time=line.scheduled_time.strftime("%H:%M"),
            subject=line.subject_name,
            duration=line.duration_minutes,
            price=charge,
        )
        for line, charge in zip(lines, charges, strict=True)
    ]


class CheckoutService:
    """Prices the cart and routes it to free, credit or card checkout."""

    def __init__(
        self,
        cart_repository: CartRepository,
        identity_repository: IdentityRepository,
        lessons_repository: LessonsRepository,
        billing_repository: BillingRepository,
        audit_repository: AuditRepository,
    ) -> None:
        self.cart_repository = cart_repository
        self.identity_repository = identity_repository
        self.lessons_repository = lessons_repository
        self.billing_repository = billing_repository
        self.audit_repository = audit_repository

    async def _load_cart(self, user: User) -> CartSummary:
        lines = await self.cart_repository.list_active_lines(user.id, utc_now())
        summary = summarize_cart(lines, settings.block_discount_size, settings.block_discount_amount)
        if not summary.items:
            raise ValidationException("Your cart is empty")
        return summary

    async def _quote(self, summary: CartSummary, payload: CheckoutRequest, user: User) -> CheckoutQuote:
        completed = 0
        if normalize_promo_code(payload.promo_code) is not None:
            completed = await self.lessons_repository.count_completed_lessons(user.id)
        return build_quote(
            summary,
            promo_code=payload.promo_code,
            completed_lessons=completed,
            referral_balance=await self.billing_repository.get_referral_balance(user.id),
            credit_balance=await self.billing_repository.get_credit_balance(user.id),
            payment_method=payload.payment_method,
            valid_codes=settings.first_lesson_promo_codes,
        )

    async def quote(self, payload: CheckoutRequest, user: User) -> CheckoutQuote:
        """Price the current cart without side effects."""
        summary = await self._load_cart(user)
        return await self._quote(summary, payload, user)

    async def checkout(self, payload: CheckoutRequest, user: User, client: EdgeFunctionsClient) -> CheckoutResult:
        """Book the cart.

        Free and credit checkouts create lessons directly and clear the cart;
        card checkouts return a hosted payment URL and leave the cart intact.
        """
        summary = await self._load_cart(user)
        learner = await self.identity_repository.get_learner_for_parent(user.id)
        if learner is None:
            raise ValidationException("No learner profile found. Please complete your profile first.")
        quote = await self._quote(summary, payload, user)

        if quote.outcome == CheckoutOutcomeEnum.FREE:
            result = await self._checkout_free(summary, quote, user, learner.id, client)
        elif quote.outcome == CheckoutOutcomeEnum.CREDITS:
            result = await self._checkout_credits(summary, quote, user, learner.id, client)
        else:
            result = await self._checkout_card(summary, quote, user, learner.id, client)

        record_checkout_outcome(result.outcome.value)
        await self.audit_repository.create_audit_log(
            actor_id=user.id,
            action=f"checkout.{result.outcome.value}",
            entity_type="cart",
            entity_id=str(user.id),
            payload={
                "item_count": quote.item_count,
                "final_price": str(quote.final_price),
                "promo_code": quote.promo_code,
                "referral_discount": str(quote.referral_discount),
                "amount_due": str(quote.amount_due),
                "pending_booking_id": result.pending_booking_id,
            },
        )
        logger.info(
            "Checkout for user %s finished: outcome=%s items=%s amount_due=%s",
            user.id,
            result.outcome.value,
            quote.item_count,
            quote.amount_due,
        )
        return result

    async def _checkout_free(
        self,
        summary: CartSummary,
        quote: CheckoutQuote,
        user: User,
        learner_id: UUID,
        client: EdgeFunctionsClient,
    ) -> CheckoutResult:
        response = await client.create_booking_with_room(
            CreateBookingRequest(
                cart_items=_booking_items(summary.items, quote.charges),
                learner_id=learner_id,
                promo_code=quote.promo_code,
            ),
        )
        if quote.referral_discount > 0:
            await self._debit_referral_best_effort(user.id, quote)
        await self.cart_repository.delete_items_for_user(user.id)
        return CheckoutResult(
            outcome=CheckoutOutcomeEnum.FREE,
            quote=quote,
            lessons=response.lessons,
            message=response.message,
        )

    async def _checkout_credits(
        self,
        summary: CartSummary,
        quote: CheckoutQuote,
        user: User,
        learner_id: UUID,
        client: EdgeFunctionsClient,
    ) -> CheckoutResult:
        row = await self.billing_repository.get_user_credit_for_update(user.id)
        if row is None or row.credits_remaining < quote.item_count:
            raise BusinessRuleException("Insufficient credits")

        response = await client.create_booking_with_room(
            CreateBookingRequest(
                cart_items=_booking_items(summary.items),
                learner_id=learner_id,
                payment_method=PaymentMethodEnum.CREDITS.value,
            ),
        )
        row = await self.billing_repository.set_credits(row, row.credits_remaining - quote.item_count)
        await self._log_credit_spend_best_effort(user.id, quote.item_count, row.credits_remaining)
        await self.cart_repository.delete_items_for_user(user.id)
        return CheckoutResult(
            outcome=CheckoutOutcomeEnum.CREDITS,
            quote=quote,
            lessons=response.lessons,
            message=response.message,
            credits_remaining=row.credits_remaining,
        )

    async def _checkout_card(
        self,
        summary: CartSummary,
        quote: CheckoutQuote,
        user: User,
        learner_id: UUID,
        client: EdgeFunctionsClient,
    ) -> CheckoutResult:
        response = await client.initiate_booking_checkout(
            InitiateCheckoutRequest(
                bookings=_checkout_bookings(summary.items, quote.charges),
                metadata={
                    "user_id": str(user.id),
                    "learner_id": str(learner_id),
                    "cart_item_ids": ",".join(str(item.id) for item in summary.items),
                    "currency": settings.currency,
                    "block_discount": str(quote.block_discount),
                    "referral_discount": str(quote.referral_discount),
                    "promo_code": quote.promo_code or "",
                },
            ),
        )
        return CheckoutResult(
            outcome=CheckoutOutcomeEnum.CARD,
            quote=quote,
            checkout_url=response.checkout_url,
            session_id=response.session_id,
            pending_booking_id=response.pending_booking_id,
        )

    async def _debit_referral_best_effort(self, user_id: UUID, quote: CheckoutQuote) -> None:
        try:
            async with self.billing_repository.savepoint():
                await self.billing_repository.debit_referral_balance(user_id, quote.referral_discount)
        except SQLAlchemyError:
            logger.exception("Failed to debit referral balance %s for user %s", quote.referral_discount, user_id)

    async def _log_credit_spend_best_effort(self, user_id: UUID, count: int, credits_after: int) -> None:
        try:
            async with self.billing_repository.savepoint():
                await self.billing_repository.create_credit_transaction(
                    user_id=user_id,
                    transaction_type=CreditTransactionTypeEnum.BOOKING,
                    credits_amount=-count,
                    credits_after=credits_after,
                    description=f"Booked {count} lesson(s) with credits",
                )
        except SQLAlchemyError:
            logger.exception("Failed to log credit transaction for user %s", user_id)


async def get_checkout_service(session: AsyncSession = Depends(get_db_session)) -> CheckoutService:
    """Dependency provider for checkout service."""
    return CheckoutService(
        cart_repository=CartRepository(session),
        identity_repository=IdentityRepository(session),
        lessons_repository=LessonsRepository(session),
        billing_repository=BillingRepository(session),
        audit_repository=AuditRepository(session),
    )
