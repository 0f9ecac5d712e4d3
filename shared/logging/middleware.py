from __future__ import annotations

from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from shared.logging.fields import CUSTOMER_ID, IDEMPOTENCY_KEY, REQUEST_ID, TRACE_ID
from shared.logging.logger import clear_correlation_context, set_correlation_context
from shared.observability.propagation import current_trace_id
from shared.utils.ids import new_request_id

REQUEST_ID_HEADER = "X-Request-Id"


class CorrelationMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or new_request_id()
        customer_id = request.headers.get("X-Customer-Id") or request.query_params.get(
            "customerId", ""
        )
        set_correlation_context(
            {
                TRACE_ID: current_trace_id() or "",
                REQUEST_ID: request_id,
                IDEMPOTENCY_KEY: request.headers.get("Idempotency-Key", ""),
                CUSTOMER_ID: customer_id,
            }
        )
        try:
            response = await call_next(request)
            response.headers.setdefault(REQUEST_ID_HEADER, request_id)
            return response
        finally:
            clear_correlation_context()
