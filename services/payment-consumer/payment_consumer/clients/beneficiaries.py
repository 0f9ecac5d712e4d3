from __future__ import annotations

from pydantic import TypeAdapter

from payment_consumer.clients.transport import DownstreamHttpAdapter, unavailable_error
from payment_consumer.core.errors import InvalidArgumentError
from shared.constants import BENEFICIARIES_SERVICE
from shared.contracts import Beneficiary
from shared.logging import get_logger
from shared.resilience import ResilientRemoteCall
from shared.utils import is_blank

logger = get_logger(__name__)
_BENEFICIARY_LIST = TypeAdapter(list[Beneficiary])


class BeneficiariesClient:
    def __init__(
        self,
        adapter: DownstreamHttpAdapter,
        remote_call: ResilientRemoteCall,
        base_path: str = "/api/v1/beneficiaries",
    ) -> None:
        self._adapter = adapter
        self._remote_call = remote_call
        self._base_path = base_path.rstrip("/")

    async def close(self) -> None:
        await self._adapter.close()

    async def list_beneficiaries(
        self, customer_id: str, account_number: str | None = None
    ) -> list[Beneficiary]:
        if is_blank(customer_id):
            raise InvalidArgumentError("Customer ID cannot be null or empty")
        logger.info(
            "beneficiaries_lookup",
            extra={"extra_fields": {"has_account_filter": not is_blank(account_number)}},
        )
        beneficiaries = await self._remote_call.call(
            self._fetch_list,
            customer_id,
            account_number,
            fallback=self._list_fallback,
        )
        logger.info("beneficiaries_found", extra={"extra_fields": {"count": len(beneficiaries)}})
        return beneficiaries

    async def get_beneficiary(self, beneficiary_id: int, customer_id: str) -> Beneficiary | None:
        if beneficiary_id is None:
            raise InvalidArgumentError("Beneficiary ID cannot be null")
        if is_blank(customer_id):
            raise InvalidArgumentError("Customer ID cannot be null or empty")
        beneficiary = await self._remote_call.call(
            self._fetch_one,
            beneficiary_id,
            customer_id,
            fallback=self._get_fallback,
        )
        if beneficiary is None:
            logger.warning(
                "beneficiary_not_returned",
                extra={"extra_fields": {"beneficiary_id": beneficiary_id}},
            )
        return beneficiary

    async def _fetch_list(
        self, customer_id: str, account_number: str | None
    ) -> list[Beneficiary]:
        params = {"customerId": customer_id}
        if not is_blank(account_number):
            params["accountNumber"] = account_number.strip()
        payload = await self._adapter.get_json(self._base_path, params=params)
        if not payload:
            return []
        return self._adapter.decode(_BENEFICIARY_LIST.validate_python, payload)

    async def _fetch_one(self, beneficiary_id: int, customer_id: str) -> Beneficiary | None:
        payload = await self._adapter.get_json(
            f"{self._base_path}/{beneficiary_id}", params={"customerId": customer_id}
        )
        if not payload:
            return None
        return self._adapter.decode(Beneficiary.model_validate, payload)

    def _list_fallback(
        self, customer_id: str, account_number: str | None, exc: Exception
    ) -> list[Beneficiary]:
        raise unavailable_error(BENEFICIARIES_SERVICE, "list_beneficiaries", exc)

    def _get_fallback(
        self, beneficiary_id: int, customer_id: str, exc: Exception
    ) -> Beneficiary | None:
        raise unavailable_error(BENEFICIARIES_SERVICE, "get_beneficiary", exc)
