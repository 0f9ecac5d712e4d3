from shared.logging.fields import (
    BENEFICIARY_ID,
    CUSTOMER_ID,
    IDEMPOTENCY_KEY,
    PAYMENT_TYPE,
    REQUEST_ID,
    SERVICE_NAME,
    STATUS,
    TRACE_ID,
    TRANSACTION_ID,
)
from shared.logging.logger import (
    clear_correlation_context,
    configure_logging,
    get_correlation_context,
    get_logger,
    mask_account_number,
    set_correlation_context,
    update_correlation_context,
)
from shared.logging.middleware import CorrelationMiddleware

__all__ = [
    "BENEFICIARY_ID",
    "CorrelationMiddleware",
    "CUSTOMER_ID",
    "IDEMPOTENCY_KEY",
    "PAYMENT_TYPE",
    "REQUEST_ID",
    "SERVICE_NAME",
    "STATUS",
    "TRACE_ID",
    "TRANSACTION_ID",
    "clear_correlation_context",
    "configure_logging",
    "get_correlation_context",
    "get_logger",
    "mask_account_number",
    "set_correlation_context",
    "update_correlation_context",
]
