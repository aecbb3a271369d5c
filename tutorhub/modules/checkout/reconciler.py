"""Checkout price reconciliation.

Turns a cart summary plus the user's promo code, referral balance and credit
balance into a quote: how much is discounted, what each lesson is charged,
and which outcome (free, credits, card) the checkout takes.
"""

from __future__ import annotations

from collections.abc import Collection, Sequence
from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal

from tutorhub.core.enums import CheckoutOutcomeEnum, PaymentMethodEnum
from tutorhub.modules.cart.pricing import CartSummary
from tutorhub.shared.exceptions import IneligibleException, InvalidCodeException
from tutorhub.shared.utils import PENNY, to_money

ZERO = Decimal("0.00")


@dataclass(frozen=True, slots=True)
class CheckoutQuote:
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
    charges: tuple[Decimal, ...]


def normalize_promo_code(code: str | None) -> str | None:
    if code is None:
        return None
    normalized = code.strip().upper()
    return normalized or None


def apply_promo_code(
    code: str | None,
    final_price: Decimal,
    completed_lessons: int,
    valid_codes: Collection[str],
) -> Decimal:
    """Discount granted by a first-lesson promo code.

    Raises ``InvalidCodeException`` for unknown codes and
    ``IneligibleException`` once the user has completed a lesson.
    """
    normalized = normalize_promo_code(code)
    if normalized is None:
        return ZERO
    if normalized not in {valid.upper() for valid in valid_codes}:
        raise InvalidCodeException("Invalid promo code")
    if completed_lessons > 0:
        raise IneligibleException("This promo code is only valid for your first lesson")
    return to_money(final_price)


def referral_discount(balance: Decimal, final_price: Decimal, promo_discount: Decimal) -> Decimal:
    remaining = final_price - promo_discount
    if remaining <= 0 or balance <= 0:
        return ZERO
    return to_money(min(balance, remaining))


def can_pay_with_credits(credit_balance: int, item_count: int) -> bool:
    return item_count > 0 and credit_balance >= item_count


def choose_payment_method(requested: PaymentMethodEnum | None, credits_possible: bool) -> PaymentMethodEnum:
    """Credits are the default whenever the balance covers the cart."""
    if requested == PaymentMethodEnum.CREDITS and credits_possible:
        return PaymentMethodEnum.CREDITS
    if requested is None and credits_possible:
        return PaymentMethodEnum.CREDITS
    return PaymentMethodEnum.CARD


def distribute_discount(prices: Sequence[Decimal], amount_due: Decimal) -> list[Decimal]:
    """Scale per-item prices so they sum exactly to ``amount_due``.

    Each charge is ``price * amount_due / subtotal`` rounded down to the
    penny; leftover pennies go to the items with the largest remainders.
    """
    subtotal = sum(prices, ZERO)
    if not prices:
        return []
    if amount_due <= 0 or subtotal <= 0:
        return [ZERO for _ in prices]
    if amount_due >= subtotal:
        return [to_money(price) for price in prices]

    exact = [price * amount_due / subtotal for price in prices]
    charges = [value.quantize(PENNY, rounding=ROUND_DOWN) for value in exact]
    leftover = int((to_money(amount_due) - sum(charges, ZERO)) / PENNY)
    by_remainder = sorted(range(len(prices)), key=lambda index: exact[index] - charges[index], reverse=True)
    for index in by_remainder[:leftover]:
        charges[index] += PENNY
    return charges


def build_quote(
    summary: CartSummary,
    *,
    promo_code: str | None,
    completed_lessons: int,
    referral_balance: Decimal,
    credit_balance: int,
    payment_method: PaymentMethodEnum | None,
    valid_codes: Collection[str],
) -> CheckoutQuote:
    """Reconcile cart totals with promo, referral and credit balances."""
    final_price = summary.final_price
    promo_discount = apply_promo_code(promo_code, final_price, completed_lessons, valid_codes)
    referral = referral_discount(referral_balance, final_price, promo_discount)
    total_discount = promo_discount + referral
    amount_due = max(ZERO, final_price - total_discount)

    credits_possible = can_pay_with_credits(credit_balance, summary.count)
    method = choose_payment_method(payment_method, credits_possible)

    if summary.count and total_discount >= final_price:
        outcome = CheckoutOutcomeEnum.FREE
    elif method == PaymentMethodEnum.CREDITS:
        outcome = CheckoutOutcomeEnum.CREDITS
    else:
        outcome = CheckoutOutcomeEnum.CARD

    return CheckoutQuote(
        item_count=summary.count,
        subtotal=summary.subtotal,
        block_discount=summary.discount,
        final_price=final_price,
        promo_code=normalize_promo_code(promo_code) if promo_discount > 0 else None,
        promo_discount=promo_discount,
        referral_discount=referral,
        total_discount=total_discount,
        amount_due=amount_due,
        credit_balance=credit_balance,
        can_use_credits=credits_possible,
        payment_method=method,
        outcome=outcome,
        charges=tuple(distribute_discount([item.price for item in summary.items], amount_due)),
    )
