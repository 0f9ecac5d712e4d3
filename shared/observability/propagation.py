from __future__ import annotations

from opentelemetry import trace
from opentelemetry.propagate import inject


def inject_headers(headers: dict[str, str] | None = None) -> dict[str, str]:
    carrier: dict[str, str] = headers or {}
    inject(carrier)
    return carrier


def outbound_headers(
    *, idempotency_key: str | None = None, request_id: str | None = None
) -> dict[str, str]:
    headers = {"Accept": "application/json"}
    if idempotency_key:
        headers["Idempotency-Key"] = idempotency_key
    if request_id:
        headers["X-Request-Id"] = request_id
    return inject_headers(headers)


def current_trace_id() -> str:
    span = trace.get_current_span()
    span_context = span.get_span_context()
    if not span_context.is_valid:
        return ""
    return format(span_context.trace_id, "032x")
