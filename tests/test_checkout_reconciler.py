from __future__ import annotations

from datetime import UTC, datetime, timedelta
from decimal import Decimal
from uuid import uuid4

import pytest

from tutorhub.core.enums import CheckoutOutcomeEnum, LessonTierEnum, PaymentMethodEnum
from tutorhub.modules.cart.pricing import CartLine, summarize_cart
from tutorhub.modules.checkout.reconciler import (
    apply_promo_code,
    build_quote,
    choose_payment_method,
    distribute_discount,
    referral_discount,
)
from tutorhub.shared.exceptions import IneligibleException, InvalidCodeException

CODES = ("100HONOR", "100OWNER")
NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


def make_summary(*prices: str):
    lines = [
        CartLine(
            id=uuid4(),
            user_id=uuid4(),
            teacher_id=uuid4(),
            teacher_name="Ustadha Amina",
            subject_id=None,
            subject_name="Quran",
            scheduled_time=NOW + timedelta(days=1, hours=index),
            duration_minutes=30,
            price=Decimal(price),
            lesson_tier=LessonTierEnum.PREMIUM,
            created_at=NOW,
            expires_at=NOW + timedelta(minutes=15),
        )
        for index, price in enumerate(prices)
    ]
    return summarize_cart(lines)


def quote_for(summary, **overrides):
    values = {
        "promo_code": None,
        "completed_lessons": 0,
        "referral_balance": Decimal("0.00"),
        "credit_balance": 0,
        "payment_method": None,
        "valid_codes": CODES,
    }
    values.update(overrides)
    return build_quote(summary, **values)


def test_promo_code_is_case_insensitive() -> None:
    assert apply_promo_code(" 100honor ", Decimal("15.00"), 0, CODES) == Decimal("15.00")


def test_unknown_promo_code_is_invalid() -> None:
    with pytest.raises(InvalidCodeException):
        apply_promo_code("WELCOME", Decimal("15.00"), 0, CODES)


def test_promo_code_rejected_after_completed_lesson() -> None:
    with pytest.raises(IneligibleException):
        apply_promo_code("100OWNER", Decimal("15.00"), 1, CODES)


def test_blank_promo_code_grants_nothing() -> None:
    assert apply_promo_code("   ", Decimal("15.00"), 3, CODES) == Decimal("0.00")


def test_referral_discount_is_capped_by_remaining_price() -> None:
    assert referral_discount(Decimal("50.00"), Decimal("22.50"), Decimal("0.00")) == Decimal("22.50")
    assert referral_discount(Decimal("5.00"), Decimal("22.50"), Decimal("0.00")) == Decimal("5.00")
    assert referral_discount(Decimal("5.00"), Decimal("22.50"), Decimal("22.50")) == Decimal("0.00")


def test_credits_are_default_only_when_balance_covers_cart() -> None:
    assert choose_payment_method(None, True) == PaymentMethodEnum.CREDITS
    assert choose_payment_method(PaymentMethodEnum.CARD, True) == PaymentMethodEnum.CARD
    assert choose_payment_method(PaymentMethodEnum.CREDITS, False) == PaymentMethodEnum.CARD


def test_distribute_discount_is_proportional() -> None:
    charges = distribute_discount([Decimal("10"), Decimal("20"), Decimal("30")], Decimal("30"))

    assert charges == [Decimal("5.00"), Decimal("10.00"), Decimal("15.00")]


def test_distribute_discount_hands_out_leftover_pennies() -> None:
    charges = distribute_discount([Decimal("7.50")] * 3, Decimal("10.00"))

    assert charges == [Decimal("3.34"), Decimal("3.33"), Decimal("3.33")]
    assert sum(charges) == Decimal("10.00")


def test_distribute_discount_zero_when_fully_discounted() -> None:
    assert distribute_discount([Decimal("7.50"), Decimal("15.00")], Decimal("0.00")) == [
        Decimal("0.00"),
        Decimal("0.00"),
    ]


def test_block_discount_flows_into_charges() -> None:
    summary = make_summary(*["7.50"] * 10)
    quote = quote_for(summary)

    assert quote.final_price == Decimal("60.00")
    assert quote.outcome == CheckoutOutcomeEnum.CARD
    assert sum(quote.charges) == quote.amount_due == Decimal("60.00")
    assert set(quote.charges) == {Decimal("6.00")}


def test_promo_code_makes_checkout_free() -> None:
    quote = quote_for(make_summary("15.00"), promo_code="100honor", credit_balance=5)

    assert quote.outcome == CheckoutOutcomeEnum.FREE
    assert quote.promo_code == "100HONOR"
    assert quote.promo_discount == Decimal("15.00")
    assert quote.referral_discount == Decimal("0.00")
    assert quote.amount_due == Decimal("0.00")
    assert quote.charges == (Decimal("0.00"),)


def test_referral_balance_covering_cart_makes_checkout_free() -> None:
    quote = quote_for(make_summary("7.50", "7.50"), referral_balance=Decimal("20.00"))

    assert quote.outcome == CheckoutOutcomeEnum.FREE
    assert quote.referral_discount == Decimal("15.00")


def test_partial_referral_reduces_card_charges() -> None:
    quote = quote_for(make_summary("7.50", "15.00"), referral_balance=Decimal("4.50"))

    assert quote.outcome == CheckoutOutcomeEnum.CARD
    assert quote.amount_due == Decimal("18.00")
    assert quote.charges == (Decimal("6.00"), Decimal("12.00"))


def test_credits_outcome_when_balance_covers_item_count() -> None:
    quote = quote_for(make_summary("7.50", "15.00"), credit_balance=2)

    assert quote.can_use_credits is True
    assert quote.payment_method == PaymentMethodEnum.CREDITS
    assert quote.outcome == CheckoutOutcomeEnum.CREDITS


def test_card_outcome_when_credits_short() -> None:
    quote = quote_for(make_summary("7.50", "15.00"), credit_balance=1, payment_method=PaymentMethodEnum.CREDITS)

    assert quote.can_use_credits is False
    assert quote.outcome == CheckoutOutcomeEnum.CARD
