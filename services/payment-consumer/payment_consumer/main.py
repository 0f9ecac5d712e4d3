from __future__ import annotations

import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from opentelemetry import trace
from starlette.responses import Response

from payment_consumer.api.routes_accounts import router as accounts_router
from payment_consumer.api.routes_beneficiaries import router as beneficiaries_router
from payment_consumer.api.routes_payments import router as payments_router
from payment_consumer.clients.factory import DownstreamClientFactory
from payment_consumer.core.config import get_settings
from payment_consumer.core.error_handlers import register_error_handlers
from payment_consumer.core.metrics import error_counter, latency_histogram, request_counter
from payment_consumer.repositories.account_repository import build_account_repository
from shared.logging import CorrelationMiddleware, configure_logging, get_logger
from shared.observability import configure_otel, current_trace_id
from shared.resilience import Bulkhead, CircuitBreakerRegistry

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    configure_logging(settings.log_level)
    configure_otel(settings.service_name)

    registry = CircuitBreakerRegistry(settings.breaker_configs())
    bulkhead = Bulkhead(limit_per_key=settings.bulkhead_limit_per_service)
    factory = DownstreamClientFactory(settings, registry, bulkhead)
    beneficiaries_client = factory.create_beneficiaries_client()
    payment_processor_client = factory.create_payment_processor_client()

    app.state.settings = settings
    app.state.breaker_registry = registry
    app.state.account_repository = build_account_repository(settings.seed_demo_accounts)
    app.state.beneficiaries_client = beneficiaries_client
    app.state.payment_processor_client = payment_processor_client
    logger.info("payment_consumer_started", extra={"extra_fields": {"app_env": settings.app_env}})

    yield

    await beneficiaries_client.close()
    await payment_processor_client.close()


app = FastAPI(title="payment-consumer", version="0.1.0", lifespan=lifespan)
app.add_middleware(CorrelationMiddleware)
register_error_handlers(app)
app.include_router(accounts_router, prefix=get_settings().api_prefix)
app.include_router(beneficiaries_router, prefix=get_settings().api_prefix)
app.include_router(payments_router, prefix=get_settings().api_prefix)


@app.middleware("http")
async def telemetry_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    tracer = trace.get_tracer("payment-consumer")
    start = time.perf_counter()
    request_counter.add(1, {"path": request.url.path, "method": request.method})

    with tracer.start_as_current_span(f"{request.method} {request.url.path}"):
        response = await call_next(request)

    duration_ms = (time.perf_counter() - start) * 1000
    latency_histogram.record(duration_ms, {"path": request.url.path, "method": request.method})
    if response.status_code >= 400:
        error_counter.add(
            1,
            {
                "path": request.url.path,
                "method": request.method,
                "status_code": response.status_code,
            },
        )

    response.headers["X-Trace-Id"] = current_trace_id()
    return response


@app.get("/health")
async def health(request: Request) -> dict[str, Any]:
    registry: CircuitBreakerRegistry = request.app.state.breaker_registry
    return {"status": "ok", "circuitBreakers": registry.snapshot()}
