from shared.observability.attributes import (
    BENEFICIARY_ID,
    CIRCUIT_STATE,
    CUSTOMER_ID,
    DOWNSTREAM_SERVICE,
    PAYMENT_STATUS,
    PAYMENT_TYPE,
    TRANSACTION_ID,
)
from shared.observability.otel import configure_otel
from shared.observability.propagation import current_trace_id, inject_headers, outbound_headers

__all__ = [
    "BENEFICIARY_ID",
    "CIRCUIT_STATE",
    "CUSTOMER_ID",
    "DOWNSTREAM_SERVICE",
    "PAYMENT_STATUS",
    "PAYMENT_TYPE",
    "TRANSACTION_ID",
    "configure_otel",
    "current_trace_id",
    "inject_headers",
    "outbound_headers",
]
