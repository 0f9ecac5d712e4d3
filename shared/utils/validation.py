from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Any

_CURRENCY_CODE_LENGTH = 3


def require_text(value: Any, *, field_name: str) -> str:
    if value is None or not isinstance(value, str):
        raise ValueError(f"{field_name} is required")
    normalized = value.strip()
    if not normalized:
        raise ValueError(f"{field_name} is required")
    return normalized


def is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def require_positive_amount(value: Any, *, field_name: str = "Amount") -> Decimal:
    if value is None:
        raise ValueError(f"{field_name} is required")
    try:
        amount = Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"{field_name} must be a decimal number") from exc
    if not amount.is_finite() or amount <= 0:
        raise ValueError(f"{field_name} must be greater than 0")
    return amount


def ensure_currency_code(currency: Any) -> str:
    normalized = require_text(currency, field_name="Currency").upper()
    if len(normalized) != _CURRENCY_CODE_LENGTH or not normalized.isalpha():
        raise ValueError(f"Invalid currency code: {normalized}")
    return normalized


def require_keys(values: Mapping[str, Any], *keys: str) -> None:
    for key in keys:
        if values.get(key) is None:
            raise ValueError(f"{key} is required")
