from __future__ import annotations

from opentelemetry import metrics

meter = metrics.get_meter("payment-consumer")
request_counter = meter.create_counter(
    "payment_consumer_request_total", description="Total requests"
)
error_counter = meter.create_counter(
    "payment_consumer_error_total", description="Total error responses"
)
latency_histogram = meter.create_histogram(
    "payment_consumer_request_latency_ms", description="Request latency in ms"
)

downstream_latency = meter.create_histogram(
    "payment_consumer_downstream_latency_ms", description="Downstream call latency"
)
downstream_errors = meter.create_counter(
    "payment_consumer_downstream_errors", description="Downstream call errors"
)
downstream_fallbacks = meter.create_counter(
    "payment_consumer_downstream_fallbacks", description="Fallbacks triggered per service"
)
circuit_rejections = meter.create_counter(
    "payment_consumer_circuit_rejections", description="Calls rejected by an open circuit"
)

beneficiary_validation_skipped = meter.create_counter(
    "payment_consumer_beneficiary_validation_skipped",
    description="Payments submitted without beneficiary validation",
)
payments_submitted = meter.create_counter(
    "payment_consumer_payments_submitted", description="Payments submitted by resulting status"
)
payments_rejected = meter.create_counter(
    "payment_consumer_payments_rejected", description="Payments rejected before submission"
)
