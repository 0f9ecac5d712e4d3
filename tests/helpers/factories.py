from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from shared.contracts import (
    Account,
    Beneficiary,
    PaymentRequest,
    PaymentResponse,
    PaymentStatus,
    PaymentType,
)


def make_account(
    *,
    customer_id: str = "CUST001",
    account_number: str = "ACC001",
    balance: str | None = "10000.00",
    status: str | None = "ACTIVE",
) -> Account:
    return Account(
        customer_id=customer_id,
        account_number=account_number,
        account_type="SAVINGS",
        balance=Decimal(balance) if balance is not None else None,
        currency="USD",
        status=status,
        customer_name="John Doe",
        email="john.doe@example.com",
        phone_number="+1234567890",
    )


def make_beneficiary(
    *,
    beneficiary_id: int = 7,
    customer_id: str = "CUST001",
    beneficiary_account_number: str | None = "ACC999",
    status: str | None = "ACTIVE",
) -> Beneficiary:
    now = datetime.now(UTC)
    return Beneficiary(
        id=beneficiary_id,
        customer_id=customer_id,
        account_number="ACC001",
        beneficiary_name="Alice Example",
        beneficiary_account_number=beneficiary_account_number,
        beneficiary_bank_code="BANK01",
        beneficiary_bank_name="Example Bank",
        beneficiary_type="DOMESTIC",
        status=status,
        created_at=now,
        updated_at=now,
    )


def make_payment_request(**overrides: Any) -> PaymentRequest:
    values: dict[str, Any] = {
        "customer_id": "CUST001",
        "from_account": "ACC001",
        "to_account": "ACC999",
        "amount": Decimal("100.00"),
        "currency": "USD",
        "payment_type": PaymentType.DOMESTIC_TRANSFER,
        "description": "rent",
        "beneficiary_id": None,
    }
    values.update(overrides)
    return PaymentRequest(**values)


def make_payment_json(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "customerId": "CUST001",
        "fromAccount": "ACC001",
        "toAccount": "ACC999",
        "amount": 100.00,
        "currency": "USD",
        "paymentType": "DOMESTIC_TRANSFER",
        "description": "rent",
    }
    payload.update(overrides)
    return payload


def make_processor_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "fromAccount": "ACC001",
        "toAccount": "ACC999",
        "amount": Decimal("100.00"),
        "currency": "USD",
        "paymentType": "DOMESTIC_TRANSFER",
    }
    payload.update(overrides)
    return payload


def make_payment_response(
    *,
    transaction_id: str = "TXN-1",
    status: PaymentStatus | None = PaymentStatus.COMPLETED,
) -> PaymentResponse:
    return PaymentResponse(
        transaction_id=transaction_id,
        from_account="ACC001",
        to_account="ACC999",
        amount=Decimal("100.00"),
        currency="USD",
        payment_type=PaymentType.DOMESTIC_TRANSFER,
        status=status,
        message="Payment processed",
    )
