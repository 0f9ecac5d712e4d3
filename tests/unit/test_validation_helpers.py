from __future__ import annotations

from decimal import Decimal

import pytest

from shared.utils import new_idempotency_key, new_request_id
from shared.utils.validation import (
    ensure_currency_code,
    is_blank,
    require_keys,
    require_positive_amount,
    require_text,
)


def test_require_text_strips_and_rejects_blank_values() -> None:
    assert require_text("  CUST001 ", field_name="Customer ID") == "CUST001"
    with pytest.raises(ValueError, match="Customer ID is required"):
        require_text("   ", field_name="Customer ID")
    with pytest.raises(ValueError):
        require_text(12, field_name="Customer ID")


def test_is_blank() -> None:
    assert is_blank(None) is True
    assert is_blank(" \t") is True
    assert is_blank("x") is False


def test_require_positive_amount() -> None:
    assert require_positive_amount("10.50") == Decimal("10.50")
    with pytest.raises(ValueError, match="must be greater than 0"):
        require_positive_amount(Decimal("0"))
    with pytest.raises(ValueError, match="must be a decimal number"):
        require_positive_amount("ten")
    with pytest.raises(ValueError, match="must be greater than 0"):
        require_positive_amount(Decimal("NaN"))


def test_ensure_currency_code_normalizes_and_rejects_invalid_codes() -> None:
    assert ensure_currency_code(" eur ") == "EUR"
    with pytest.raises(ValueError):
        ensure_currency_code("USDT")
    with pytest.raises(ValueError):
        ensure_currency_code("U5D")


def test_require_keys_reports_first_missing_key() -> None:
    require_keys({"fromAccount": "ACC001"}, "fromAccount")
    with pytest.raises(ValueError, match="amount is required"):
        require_keys({"fromAccount": "ACC001", "amount": None}, "fromAccount", "amount")


def test_generated_identifiers_are_unique() -> None:
    assert new_idempotency_key() != new_idempotency_key()
    assert len(new_request_id()) == 32
