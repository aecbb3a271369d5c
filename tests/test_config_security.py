from __future__ import annotations

from decimal import Decimal

import pytest
from pydantic import ValidationError

from tutorhub.core.config import Settings


def test_default_secret_key_allowed_in_development() -> None:
    settings = Settings(_env_file=None, app_env="development", secret_key="change-me")
    assert settings.secret_key == "change-me"


def test_default_secret_key_rejected_in_production() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, app_env="production", secret_key="change-me")


def test_placeholder_secret_key_prefix_rejected_in_production() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, app_env="prod", secret_key="change-me-in-production")


def test_custom_secret_key_allowed_in_production() -> None:
    settings = Settings(_env_file=None, app_env="production", secret_key="super-secure-value")
    assert settings.secret_key == "super-secure-value"


def test_promo_codes_parsed_from_comma_separated_value() -> None:
    settings = Settings(_env_file=None, first_lesson_promo_codes=" freefirst, 100honor ,,")
    assert settings.first_lesson_promo_codes == ("FREEFIRST", "100HONOR")


def test_promo_codes_read_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FIRST_LESSON_PROMO_CODES", "alpha,beta")
    settings = Settings(_env_file=None)
    assert settings.first_lesson_promo_codes == ("ALPHA", "BETA")


def test_empty_promo_code_list_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, first_lesson_promo_codes="")


def test_non_positive_refresh_interval_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, cart_refresh_interval_seconds=0)


def test_cart_and_pricing_defaults() -> None:
    settings = Settings(_env_file=None)
    assert settings.cart_item_ttl_minutes == 15
    assert settings.cart_expiry_warning_minutes == 5
    assert settings.block_discount_size == 10
    assert settings.block_discount_amount == Decimal("15.00")
    assert settings.lesson_price_30 == Decimal("7.50")
    assert settings.lesson_price_60 == Decimal("15.00")


def test_functions_base_url_trailing_slash_stripped() -> None:
    settings = Settings(_env_file=None, functions_base_url="https://example.test/functions/v1/")
    assert settings.functions_base_url == "https://example.test/functions/v1"
