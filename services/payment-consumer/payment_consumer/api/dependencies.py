from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from payment_consumer.clients.beneficiaries import BeneficiariesClient
from payment_consumer.clients.payment_processor import PaymentProcessorClient
from payment_consumer.repositories.account_repository import InMemoryAccountRepository
from payment_consumer.services.payment_orchestrator import PaymentOrchestrator


def get_account_repository(request: Request) -> InMemoryAccountRepository:
    return request.app.state.account_repository


def get_beneficiaries_client(request: Request) -> BeneficiariesClient:
    return request.app.state.beneficiaries_client


def get_payment_processor_client(request: Request) -> PaymentProcessorClient:
    return request.app.state.payment_processor_client


def get_payment_orchestrator(
    accounts: Annotated[InMemoryAccountRepository, Depends(get_account_repository)],
    beneficiaries_client: Annotated[BeneficiariesClient, Depends(get_beneficiaries_client)],
    payment_processor_client: Annotated[
        PaymentProcessorClient, Depends(get_payment_processor_client)
    ],
) -> PaymentOrchestrator:
    return PaymentOrchestrator(accounts, beneficiaries_client, payment_processor_client)
