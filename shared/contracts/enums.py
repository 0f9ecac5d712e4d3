from __future__ import annotations

from enum import Enum


class PaymentType(str, Enum):
    DOMESTIC_TRANSFER = "DOMESTIC_TRANSFER"
    INTERNATIONAL_TRANSFER = "INTERNATIONAL_TRANSFER"
    BILL_PAYMENT = "BILL_PAYMENT"
    P2P_TRANSFER = "P2P_TRANSFER"


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    FRAUD_CHECK_FAILED = "FRAUD_CHECK_FAILED"
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"
    ACCOUNT_VALIDATION_FAILED = "ACCOUNT_VALIDATION_FAILED"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class AccountStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    BLOCKED = "BLOCKED"


class ErrorCategory(str, Enum):
    INVALID_REQUEST = "invalid_request"
    VALIDATION_ERROR = "validation_error"
    RESOURCE_NOT_FOUND = "resource_not_found"
    PAYMENT_PROCESSING_ERROR = "payment_processing_error"
    SERVICE_UNAVAILABLE = "service_unavailable"
    CIRCUIT_BREAKER_OPEN = "circuit_breaker_open"
    REQUEST_TIMEOUT = "request_timeout"
    DOWNSTREAM_TIMEOUT = "downstream_timeout"
    DOWNSTREAM_HTTP_ERROR = "downstream_http_error"
    DOWNSTREAM_CONNECTION_ERROR = "downstream_connection_error"
    DOWNSTREAM_RESPONSE_ERROR = "downstream_response_error"
