from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from payment_consumer.api.dependencies import get_payment_orchestrator
from payment_consumer.services.payment_orchestrator import PaymentOrchestrator
from shared.contracts import Beneficiary

router = APIRouter(tags=["beneficiaries"])


@router.get("/beneficiaries")
async def get_beneficiaries(
    customer_id: Annotated[str, Query(alias="customerId")],
    orchestrator: Annotated[PaymentOrchestrator, Depends(get_payment_orchestrator)],
    account_number: Annotated[str | None, Query(alias="accountNumber")] = None,
) -> list[Beneficiary]:
    return await orchestrator.get_beneficiaries(customer_id, account_number)
