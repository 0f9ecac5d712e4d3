from __future__ import annotations

TRACE_ID = "trace_id"
REQUEST_ID = "request_id"
IDEMPOTENCY_KEY = "idempotency_key"
CUSTOMER_ID = "customer_id"
TRANSACTION_ID = "transaction_id"
BENEFICIARY_ID = "beneficiary_id"
PAYMENT_TYPE = "payment_type"
STATUS = "status"
SERVICE_NAME = "service_name"
