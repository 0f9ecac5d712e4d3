from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any, TypeVar

import httpx
from opentelemetry import trace
from pydantic import ValidationError
from pydantic_core import to_jsonable_python

from payment_consumer.core.errors import (
    CallNotPermittedError,
    DownstreamConnectionError,
    DownstreamError,
    DownstreamHttpError,
    DownstreamResponseError,
    DownstreamTimeoutError,
    ServiceUnavailableError,
)
from payment_consumer.core.metrics import (
    circuit_rejections,
    downstream_errors,
    downstream_fallbacks,
    downstream_latency,
)
from shared.constants import display_name_for_service
from shared.contracts import PaymentResponse
from shared.logging import REQUEST_ID, get_correlation_context, get_logger
from shared.observability import attributes, outbound_headers
from shared.resilience import CircuitBreakerOpenError, RemoteCallTimeoutError

logger = get_logger(__name__)

T = TypeVar("T")


class DownstreamHttpAdapter:
    """JSON-over-HTTP access to one downstream service.

    Transport problems and unreadable bodies are raised as ``DownstreamError``
    subclasses so the resilience layer can classify them; a successful response
    without a body yields ``None``.
    """

    def __init__(self, service_name: str, http_client: httpx.AsyncClient) -> None:
        self.service_name = service_name
        self._http_client = http_client
        self._tracer = trace.get_tracer(__name__)

    async def get_json(self, path: str, *, params: dict[str, str] | None = None) -> Any:
        return await self._send("GET", path, params=params)

    async def post_json(
        self, path: str, payload: dict[str, Any], *, idempotency_key: str | None = None
    ) -> Any:
        return await self._send(
            "POST",
            path,
            json=to_jsonable_python(payload),
            idempotency_key=idempotency_key,
        )

    async def _send(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
        idempotency_key: str | None = None,
    ) -> Any:
        headers = outbound_headers(
            idempotency_key=idempotency_key,
            request_id=get_correlation_context().get(REQUEST_ID),
        )
        start = time.perf_counter()
        try:
            with self._tracer.start_as_current_span(f"{self.service_name} {method}") as span:
                span.set_attribute(attributes.DOWNSTREAM_SERVICE, self.service_name)
                response = await self._http_client.request(
                    method, path, params=params, json=json, headers=headers
                )
                span.set_attribute("http.status_code", response.status_code)
        except httpx.TimeoutException as exc:
            self._record_error("DownstreamTimeoutError")
            raise DownstreamTimeoutError(self.service_name) from exc
        except httpx.TransportError as exc:
            self._record_error("DownstreamConnectionError")
            raise DownstreamConnectionError(self.service_name, str(exc)) from exc
        finally:
            duration_ms = (time.perf_counter() - start) * 1000
            downstream_latency.record(duration_ms, {"service": self.service_name, "method": method})

        if not response.is_success:
            self._record_error("DownstreamHttpError")
            raise DownstreamHttpError(self.service_name, response.status_code)
        if response.status_code == httpx.codes.NO_CONTENT or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise self._response_error("Downstream returned a body that is not JSON") from exc

    def decode(self, validate: Callable[[Any], T], payload: Any) -> T:
        """Applies a pydantic validator to a response body."""
        try:
            return validate(payload)
        except ValidationError as exc:
            raise self._response_error(
                "Downstream response did not match the expected shape"
            ) from exc

    def _response_error(self, message: str) -> DownstreamResponseError:
        self._record_error("DownstreamResponseError")
        return DownstreamResponseError(self.service_name, message)

    def _record_error(self, error: str) -> None:
        downstream_errors.add(1, {"service": self.service_name, "error": error})

    async def close(self) -> None:
        await self._http_client.aclose()


def is_downstream_failure(exc: Exception) -> bool:
    return isinstance(exc, DownstreamError | RemoteCallTimeoutError)


def is_transient_failure(exc: Exception) -> bool:
    if isinstance(exc, DownstreamHttpError):
        return exc.is_server_error
    return isinstance(
        exc, DownstreamTimeoutError | DownstreamConnectionError | RemoteCallTimeoutError
    )


def unavailable_error(
    service_name: str,
    operation: str,
    exc: Exception,
    *,
    fallback_response: PaymentResponse | None = None,
) -> ServiceUnavailableError:
    """Translates the failure that triggered a fallback into the caller-facing error."""
    display_name = display_name_for_service(service_name)
    downstream_fallbacks.add(1, {"service": service_name, "operation": operation})
    logger.error(
        "fallback_triggered",
        extra={
            "extra_fields": {
                "service_name": service_name,
                "operation": operation,
                "cause": type(exc).__name__,
            }
        },
    )
    if isinstance(exc, CircuitBreakerOpenError):
        trace.get_current_span().set_attribute(attributes.CIRCUIT_STATE, exc.state)
        circuit_rejections.add(1, {"service": service_name})
        error: ServiceUnavailableError = CallNotPermittedError(
            display_name, str(exc), fallback_response=fallback_response
        )
    else:
        error = ServiceUnavailableError(
            display_name,
            f"{display_name} service is currently unavailable",
            fallback_response=fallback_response,
        )
    error.__cause__ = exc
    return error
