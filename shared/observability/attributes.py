from __future__ import annotations

CUSTOMER_ID = "payment.customer_id"
TRANSACTION_ID = "payment.transaction_id"
PAYMENT_TYPE = "payment.type"
PAYMENT_STATUS = "payment.status"
BENEFICIARY_ID = "payment.beneficiary_id"
DOWNSTREAM_SERVICE = "downstream.service"
CIRCUIT_STATE = "downstream.circuit_state"
