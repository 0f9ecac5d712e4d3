from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from shared.contracts.enums import PaymentStatus, PaymentType


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Account(CamelModel):
    customer_id: str
    account_number: str
    account_type: str | None = None
    balance: Decimal | None = None
    currency: str | None = None
    status: str | None = None
    customer_name: str | None = None
    email: str | None = None
    phone_number: str | None = None


class Beneficiary(CamelModel):
    id: int | None = None
    customer_id: str | None = None
    account_number: str | None = None
    beneficiary_name: str | None = None
    beneficiary_account_number: str | None = None
    beneficiary_bank_code: str | None = None
    beneficiary_bank_name: str | None = None
    beneficiary_type: str | None = None
    status: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PaymentRequest(CamelModel):
    """Inbound payment instruction.

    Blank or missing values are accepted; the orchestrator owns the
    structural checks and reports them as invalid-argument errors.
    """

    customer_id: str | None = None
    from_account: str | None = None
    to_account: str | None = None
    amount: Decimal | None = None
    currency: str | None = None
    payment_type: PaymentType | None = None
    description: str | None = Field(default=None, max_length=255)
    beneficiary_id: int | None = None

    @field_validator("currency")
    @classmethod
    def normalize_currency(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip().upper()


class PaymentResponse(CamelModel):
    transaction_id: str | None = None
    from_account: str | None = None
    to_account: str | None = None
    amount: Decimal | None = None
    currency: str | None = None
    payment_type: PaymentType | None = None
    status: PaymentStatus | None = None
    message: str | None = None
    failure_reason: str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("timestamp", mode="before")
    @classmethod
    def default_missing_timestamp(cls, value: datetime | str | None) -> datetime | str:
        if value is None:
            return datetime.now(UTC)
        return value
