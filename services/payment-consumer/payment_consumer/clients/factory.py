from __future__ import annotations

import httpx

from payment_consumer.clients.beneficiaries import BeneficiariesClient
from payment_consumer.clients.payment_processor import PaymentProcessorClient
from payment_consumer.clients.transport import (
    DownstreamHttpAdapter,
    is_downstream_failure,
    is_transient_failure,
)
from payment_consumer.core.config import Settings
from shared.constants import BENEFICIARIES_SERVICE, PAYMENT_PROCESSOR_SERVICE
from shared.resilience import Bulkhead, CircuitBreakerRegistry, ResilientRemoteCall


class DownstreamClientFactory:
    def __init__(
        self,
        settings: Settings,
        registry: CircuitBreakerRegistry,
        bulkhead: Bulkhead,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._registry = registry
        self._bulkhead = bulkhead
        self._transport = transport

    def _http_client(self, base_url: str, timeout_seconds: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=base_url, timeout=timeout_seconds, transport=self._transport
        )

    def _remote_call(self, service_name: str, timeout_seconds: float) -> ResilientRemoteCall:
        return ResilientRemoteCall(
            service_name,
            self._registry,
            retry_policy=self._settings.read_retry_policy(service_name),
            timeout_seconds=timeout_seconds,
            is_failure=is_downstream_failure,
            should_retry=is_transient_failure,
            bulkhead=self._bulkhead,
        )

    def create_beneficiaries_client(self) -> BeneficiariesClient:
        timeout = self._settings.beneficiaries_timeout_seconds
        adapter = DownstreamHttpAdapter(
            BENEFICIARIES_SERVICE,
            self._http_client(self._settings.beneficiaries_base_url, timeout),
        )
        return BeneficiariesClient(
            adapter,
            self._remote_call(BENEFICIARIES_SERVICE, timeout),
            base_path=self._settings.beneficiaries_base_path,
        )

    def create_payment_processor_client(self) -> PaymentProcessorClient:
        timeout = self._settings.payment_processor_timeout_seconds
        adapter = DownstreamHttpAdapter(
            PAYMENT_PROCESSOR_SERVICE,
            self._http_client(self._settings.payment_processor_base_url, timeout),
        )
        read_call = self._remote_call(PAYMENT_PROCESSOR_SERVICE, timeout)
        return PaymentProcessorClient(
            adapter,
            read_call,
            read_call.with_retry_policy(self._settings.submit_retry_policy()),
            base_path=self._settings.payment_processor_base_path,
        )
