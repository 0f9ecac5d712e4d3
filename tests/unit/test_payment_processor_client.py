from __future__ import annotations

import json

import httpx
import pytest
from payment_consumer.clients.factory import DownstreamClientFactory
from payment_consumer.clients.payment_processor import PaymentProcessorClient
from payment_consumer.core.errors import (
    InvalidArgumentError,
    PaymentProcessingError,
    ServiceUnavailableError,
)

from shared.contracts import PaymentStatus, PaymentType
from shared.resilience import Bulkhead, CircuitBreakerRegistry
from tests.helpers import (
    RecordingHandler,
    build_test_settings,
    make_payment_response,
    make_processor_payload,
)


def _client(handler: RecordingHandler, **overrides: object) -> PaymentProcessorClient:
    settings = build_test_settings(**overrides)
    factory = DownstreamClientFactory(
        settings,
        CircuitBreakerRegistry(settings.breaker_configs()),
        Bulkhead(),
        transport=httpx.MockTransport(handler),
    )
    return factory.create_payment_processor_client()


def _response_json(status: PaymentStatus = PaymentStatus.COMPLETED) -> dict[str, object]:
    return make_payment_response(status=status).model_dump(mode="json", by_alias=True)


@pytest.mark.asyncio
async def test_submit_payment_posts_payload_with_idempotency_key() -> None:
    handler = RecordingHandler(lambda _request: httpx.Response(201, json=_response_json()))
    client = _client(handler)

    response = await client.submit_payment(make_processor_payload(), "idem-42")
    await client.close()

    request = handler.requests[0]
    body = json.loads(request.content)
    assert request.method == "POST"
    assert request.url.path == "/api/payments"
    assert request.headers["Idempotency-Key"] == "idem-42"
    assert body["fromAccount"] == "ACC001"
    assert body["paymentType"] == "DOMESTIC_TRANSFER"
    assert response.status == PaymentStatus.COMPLETED
    assert response.transaction_id == "TXN-1"


@pytest.mark.asyncio
async def test_submit_payment_retries_with_the_same_generated_key() -> None:
    responses = iter([httpx.Response(503), httpx.Response(200, json=_response_json())])
    handler = RecordingHandler(lambda _request: next(responses))
    client = _client(handler)

    response = await client.submit_payment(make_processor_payload())

    keys = {request.headers["Idempotency-Key"] for request in handler.requests}
    assert len(handler.requests) == 2
    assert len(keys) == 1
    assert keys.pop()
    assert response.status == PaymentStatus.COMPLETED


@pytest.mark.asyncio
async def test_submit_payment_uses_submit_retry_budget() -> None:
    handler = RecordingHandler(lambda _request: httpx.Response(500))
    client = _client(handler, payment_submit_retry_max_attempts=1)

    with pytest.raises(ServiceUnavailableError):
        await client.submit_payment(make_processor_payload())

    assert len(handler.requests) == 1


@pytest.mark.asyncio
async def test_submit_payment_fallback_attaches_failed_synthetic_response() -> None:
    handler = RecordingHandler(lambda _request: httpx.Response(503))
    client = _client(handler)

    with pytest.raises(ServiceUnavailableError) as exc_info:
        await client.submit_payment(make_processor_payload())

    synthetic = exc_info.value.fallback_response
    assert len(handler.requests) == 2
    assert exc_info.value.service_name == "Payment Processor"
    assert synthetic is not None
    assert synthetic.status == PaymentStatus.FAILED
    assert synthetic.from_account == "ACC001"
    assert synthetic.payment_type == PaymentType.DOMESTIC_TRANSFER
    assert synthetic.message == "Payment processing failed"
    assert synthetic.failure_reason is not None
    assert synthetic.transaction_id is None


@pytest.mark.asyncio
async def test_submit_payment_without_response_body_is_a_processing_error() -> None:
    handler = RecordingHandler(lambda _request: httpx.Response(200))
    client = _client(handler)

    with pytest.raises(PaymentProcessingError) as exc_info:
        await client.submit_payment(make_processor_payload())

    assert exc_info.value.message == "Payment processor returned null response"


@pytest.mark.asyncio
async def test_submit_payment_requires_core_fields() -> None:
    handler = RecordingHandler(lambda _request: httpx.Response(200, json=_response_json()))
    client = _client(handler)

    with pytest.raises(InvalidArgumentError) as exc_info:
        await client.submit_payment(make_processor_payload(toAccount=None))

    assert exc_info.value.message == "toAccount is required"
    assert handler.requests == []


@pytest.mark.asyncio
async def test_get_status_reads_transaction() -> None:
    handler = RecordingHandler(
        lambda _request: httpx.Response(200, json=_response_json(PaymentStatus.PROCESSING))
    )
    client = _client(handler)

    response = await client.get_status(" TXN-1 ")

    assert handler.requests[0].url.path == "/api/payments/TXN-1"
    assert response is not None
    assert response.status == PaymentStatus.PROCESSING


@pytest.mark.asyncio
async def test_get_status_without_body_returns_none() -> None:
    client = _client(RecordingHandler(lambda _request: httpx.Response(204)))

    assert await client.get_status("TXN-1") is None


@pytest.mark.asyncio
async def test_get_status_remote_not_found_is_reported_unavailable() -> None:
    handler = RecordingHandler(lambda _request: httpx.Response(404))
    client = _client(handler)

    with pytest.raises(ServiceUnavailableError):
        await client.get_status("TXN-404")

    assert len(handler.requests) == 1


@pytest.mark.asyncio
async def test_get_status_rejects_blank_transaction_id() -> None:
    handler = RecordingHandler(lambda _request: httpx.Response(200, json=_response_json()))
    client = _client(handler)

    with pytest.raises(InvalidArgumentError):
        await client.get_status("")
    assert handler.requests == []


@pytest.mark.asyncio
async def test_submit_payment_unreadable_response_is_reported_unavailable() -> None:
    body = {"transactionId": "TXN-1", "status": "REVERSED"}
    handler = RecordingHandler(lambda _request: httpx.Response(201, json=body))
    client = _client(handler)

    with pytest.raises(ServiceUnavailableError) as exc_info:
        await client.submit_payment(make_processor_payload())

    assert len(handler.requests) == 1
    assert exc_info.value.fallback_response is not None
    assert exc_info.value.fallback_response.status == PaymentStatus.FAILED


@pytest.mark.asyncio
async def test_get_status_unreadable_response_is_reported_unavailable() -> None:
    body = {"transactionId": "T1", "status": "REVERSED"}
    handler = RecordingHandler(lambda _request: httpx.Response(200, json=body))
    client = _client(handler)

    with pytest.raises(ServiceUnavailableError):
        await client.get_status("T1")

    assert len(handler.requests) == 1


@pytest.mark.asyncio
async def test_get_status_non_json_body_is_reported_unavailable() -> None:
    handler = RecordingHandler(lambda _request: httpx.Response(200, content=b"not json"))
    client = _client(handler)

    with pytest.raises(ServiceUnavailableError):
        await client.get_status("T1")

    assert len(handler.requests) == 1
