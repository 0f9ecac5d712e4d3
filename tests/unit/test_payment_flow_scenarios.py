from __future__ import annotations

import json

import httpx

from tests.helpers import (
    RecordingHandler,
    assert_error_payload,
    build_consumer_app,
    build_test_settings,
    create_test_client,
    make_beneficiary,
    make_payment_json,
    make_payment_response,
)

PREFIX = "/api/v1/consumer"
BENEFICIARIES_PATH = "/api/v1/beneficiaries"
PAYMENTS_PATH = "/api/payments"


def _processor_completed(request: httpx.Request) -> httpx.Response:
    if request.url.path.startswith(PAYMENTS_PATH):
        body = make_payment_response(transaction_id="TXN-100").model_dump(
            mode="json", by_alias=True
        )
        return httpx.Response(201, json=body)
    return httpx.Response(200, json=make_beneficiary().model_dump(mode="json", by_alias=True))


def test_completed_payment_is_returned_unchanged_with_created_status() -> None:
    handler = RecordingHandler(_processor_completed)
    app = build_consumer_app(handler)

    with create_test_client(app) as client:
        response = client.post(
            f"{PREFIX}/payments",
            json=make_payment_json(toAccount="ACC002"),
            headers={"Idempotency-Key": "idem-100"},
        )

    submitted = handler.calls_to(PAYMENTS_PATH)
    assert response.status_code == 201
    assert response.json()["transactionId"] == "TXN-100"
    assert response.json()["status"] == "COMPLETED"
    assert len(submitted) == 1
    assert submitted[0].headers["Idempotency-Key"] == "idem-100"
    assert json.loads(submitted[0].content)["toAccount"] == "ACC002"


def test_insufficient_balance_is_rejected_without_remote_submission() -> None:
    handler = RecordingHandler(_processor_completed)
    app = build_consumer_app(handler)

    with create_test_client(app) as client:
        response = client.post(f"{PREFIX}/payments", json=make_payment_json(amount=999999.00))

    assert_error_payload(
        response,
        expected_status=400,
        expected_category="payment_processing_error",
        expected_message="Insufficient balance",
    )
    assert handler.requests == []


def test_unknown_customer_account_lookup_returns_not_found() -> None:
    app = build_consumer_app(RecordingHandler(_processor_completed))

    with create_test_client(app) as client:
        response = client.get(f"{PREFIX}/accounts/CUST999")

    assert_error_payload(
        response,
        expected_status=404,
        expected_category="resource_not_found",
        expected_message="Account not found for customer: CUST999",
    )


def test_payment_proceeds_when_beneficiary_service_is_down() -> None:
    def responder(request: httpx.Request) -> httpx.Response:
        if request.url.path.startswith(BENEFICIARIES_PATH):
            return httpx.Response(503)
        return _processor_completed(request)

    handler = RecordingHandler(responder)
    app = build_consumer_app(handler)

    with create_test_client(app) as client:
        response = client.post(f"{PREFIX}/payments", json=make_payment_json(beneficiaryId=7))

    assert response.status_code == 201
    assert len(handler.calls_to(BENEFICIARIES_PATH)) == 3
    assert len(handler.calls_to(PAYMENTS_PATH)) == 1


def test_beneficiary_listing_reports_outage_then_open_circuit() -> None:
    handler = RecordingHandler(lambda _request: httpx.Response(500))
    settings = build_test_settings(
        breaker_sliding_window_size=3, breaker_minimum_number_of_calls=3
    )
    app = build_consumer_app(handler, settings=settings)

    with create_test_client(app) as client:
        first = client.get(f"{PREFIX}/beneficiaries", params={"customerId": "CUST001"})
        second = client.get(f"{PREFIX}/beneficiaries", params={"customerId": "CUST001"})
        states = app.state.breaker_registry.snapshot()

    assert_error_payload(
        first,
        expected_status=503,
        expected_category="service_unavailable",
        expected_message="Beneficiaries service is currently unavailable. Please try again later.",
    )
    assert_error_payload(second, expected_status=503, expected_category="circuit_breaker_open")
    assert len(handler.requests) == 3
    assert states == {"beneficiariesService": "open"}


def test_processor_outage_returns_service_unavailable() -> None:
    def responder(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    handler = RecordingHandler(responder)
    app = build_consumer_app(handler)

    with create_test_client(app) as client:
        response = client.post(f"{PREFIX}/payments", json=make_payment_json())

    assert_error_payload(
        response,
        expected_status=503,
        expected_category="service_unavailable",
        expected_message=(
            "Payment Processor service is currently unavailable. Please try again later."
        ),
    )
    assert len(handler.calls_to(PAYMENTS_PATH)) == 2
    assert response.headers["X-Request-Id"]


def test_payment_status_lookup_round_trip() -> None:
    def responder(request: httpx.Request) -> httpx.Response:
        body = make_payment_response(transaction_id="TXN-7").model_dump(mode="json", by_alias=True)
        return httpx.Response(200, json=body)

    handler = RecordingHandler(responder)
    app = build_consumer_app(handler)

    with create_test_client(app) as client:
        response = client.get(f"{PREFIX}/payments/TXN-7", params={"customerId": "CUST002"})

    assert response.status_code == 200
    assert response.json()["transactionId"] == "TXN-7"
    assert handler.requests[0].url.path == f"{PAYMENTS_PATH}/TXN-7"


def test_payment_proceeds_when_beneficiary_response_is_unreadable() -> None:
    def responder(request: httpx.Request) -> httpx.Response:
        if request.url.path.startswith(BENEFICIARIES_PATH):
            return httpx.Response(200, content=b"<html>maintenance</html>")
        return _processor_completed(request)

    handler = RecordingHandler(responder)
    app = build_consumer_app(handler)

    with create_test_client(app) as client:
        response = client.post(f"{PREFIX}/payments", json=make_payment_json(beneficiaryId=7))

    assert response.status_code == 201
    assert len(handler.calls_to(BENEFICIARIES_PATH)) == 1


def test_unreadable_processor_response_returns_service_unavailable() -> None:
    handler = RecordingHandler(
        lambda _request: httpx.Response(201, json={"transactionId": "T1", "status": "REVERSED"})
    )
    app = build_consumer_app(handler)

    with create_test_client(app) as client:
        response = client.post(f"{PREFIX}/payments", json=make_payment_json())

    assert_error_payload(
        response,
        expected_status=503,
        expected_category="service_unavailable",
    )
    assert len(handler.calls_to(PAYMENTS_PATH)) == 1
