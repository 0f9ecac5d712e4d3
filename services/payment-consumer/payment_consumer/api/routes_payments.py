from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Header, Query, Response, status

from payment_consumer.api.dependencies import get_payment_orchestrator
from payment_consumer.services.payment_orchestrator import PaymentOrchestrator
from shared.contracts import PaymentRequest, PaymentResponse, PaymentStatus

router = APIRouter(tags=["payments"])

_REJECTED_STATUS_MARKERS = ("FAILED", "FRAUD", "INSUFFICIENT")


def resolve_payment_http_status(payment_status: PaymentStatus | None) -> int:
    if payment_status is None:
        return status.HTTP_202_ACCEPTED
    name = payment_status.value
    if "COMPLETED" in name:
        return status.HTTP_201_CREATED
    if any(marker in name for marker in _REJECTED_STATUS_MARKERS):
        return status.HTTP_400_BAD_REQUEST
    return status.HTTP_202_ACCEPTED


@router.post("/payments", status_code=status.HTTP_202_ACCEPTED)
async def process_payment(
    payload: PaymentRequest,
    response: Response,
    orchestrator: Annotated[PaymentOrchestrator, Depends(get_payment_orchestrator)],
    idempotency_key: Annotated[str | None, Header(alias="Idempotency-Key")] = None,
) -> PaymentResponse:
    result = await orchestrator.process_payment(payload, idempotency_key)
    response.status_code = resolve_payment_http_status(result.status)
    return result


@router.get("/payments/{transaction_id}")
async def get_payment_status(
    transaction_id: str,
    customer_id: Annotated[str, Query(alias="customerId")],
    orchestrator: Annotated[PaymentOrchestrator, Depends(get_payment_orchestrator)],
) -> PaymentResponse:
    return await orchestrator.get_payment_status(transaction_id, customer_id)
