from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from payment_consumer.api.dependencies import get_payment_orchestrator
from payment_consumer.services.payment_orchestrator import PaymentOrchestrator
from shared.contracts import Account

router = APIRouter(tags=["accounts"])


@router.get("/accounts/{customer_id}")
async def get_account_details(
    customer_id: str,
    orchestrator: Annotated[PaymentOrchestrator, Depends(get_payment_orchestrator)],
) -> Account:
    return orchestrator.get_account_details(customer_id)
