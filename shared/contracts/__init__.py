from shared.contracts.dto import (
    Account,
    Beneficiary,
    CamelModel,
    PaymentRequest,
    PaymentResponse,
)
from shared.contracts.enums import AccountStatus, ErrorCategory, PaymentStatus, PaymentType

__all__ = [
    "Account",
    "AccountStatus",
    "Beneficiary",
    "CamelModel",
    "ErrorCategory",
    "PaymentRequest",
    "PaymentResponse",
    "PaymentStatus",
    "PaymentType",
]
