from __future__ import annotations

from typing import Any

from payment_consumer.clients.transport import DownstreamHttpAdapter, unavailable_error
from payment_consumer.core.errors import InvalidArgumentError, PaymentProcessingError
from shared.constants import PAYMENT_PROCESSOR_SERVICE
from shared.contracts import PaymentResponse, PaymentStatus
from shared.logging import TRANSACTION_ID, get_logger, mask_account_number
from shared.resilience import ResilientRemoteCall
from shared.utils import is_blank, new_idempotency_key, require_keys

logger = get_logger(__name__)

_FALLBACK_FAILURE_REASON = (
    "Payment processor service is currently unavailable. Please try again later."
)


class PaymentProcessorClient:
    """Submits payments to, and reads their status from, the payment processor.

    Reads and submissions use separate resilience policies: a submission carries
    an ``Idempotency-Key`` header that stays the same across its retries so the
    processor can discard duplicates.
    """

    def __init__(
        self,
        adapter: DownstreamHttpAdapter,
        remote_call: ResilientRemoteCall,
        submit_remote_call: ResilientRemoteCall | None = None,
        base_path: str = "/api/payments",
    ) -> None:
        self._adapter = adapter
        self._remote_call = remote_call
        self._submit_remote_call = submit_remote_call or remote_call
        self._base_path = base_path.rstrip("/")

    async def close(self) -> None:
        await self._adapter.close()

    async def submit_payment(
        self, payload: dict[str, Any], idempotency_key: str | None = None
    ) -> PaymentResponse:
        if payload is None:
            raise InvalidArgumentError("Payment request cannot be null")
        try:
            require_keys(payload, "fromAccount", "toAccount", "amount")
        except ValueError as exc:
            raise InvalidArgumentError(str(exc)) from exc

        key = idempotency_key or new_idempotency_key()
        logger.info(
            "payment_submission_started",
            extra={
                "extra_fields": {
                    "from_account": mask_account_number(payload["fromAccount"]),
                    "to_account": mask_account_number(payload["toAccount"]),
                    "amount": payload["amount"],
                }
            },
        )
        response = await self._submit_remote_call.call(
            self._post_payment,
            payload,
            key,
            fallback=self._submit_fallback,
        )
        if response is None:
            logger.error("payment_processor_empty_response")
            raise PaymentProcessingError("Payment processor returned null response")

        logger.info(
            "payment_submission_completed",
            extra={
                "extra_fields": {
                    TRANSACTION_ID: response.transaction_id,
                    "status": response.status.value if response.status else None,
                }
            },
        )
        return response

    async def get_status(self, transaction_id: str) -> PaymentResponse | None:
        if is_blank(transaction_id):
            raise InvalidArgumentError("Transaction ID cannot be null or empty")
        response = await self._remote_call.call(
            self._fetch_status,
            transaction_id.strip(),
            fallback=self._status_fallback,
        )
        if response is None:
            logger.warning(
                "payment_status_not_returned",
                extra={"extra_fields": {TRANSACTION_ID: transaction_id}},
            )
        return response

    async def _post_payment(
        self, payload: dict[str, Any], idempotency_key: str
    ) -> PaymentResponse | None:
        body = await self._adapter.post_json(
            self._base_path, payload, idempotency_key=idempotency_key
        )
        if not body:
            return None
        return self._adapter.decode(PaymentResponse.model_validate, body)

    async def _fetch_status(self, transaction_id: str) -> PaymentResponse | None:
        body = await self._adapter.get_json(f"{self._base_path}/{transaction_id}")
        if not body:
            return None
        return self._adapter.decode(PaymentResponse.model_validate, body)

    def _submit_fallback(
        self, payload: dict[str, Any], idempotency_key: str, exc: Exception
    ) -> PaymentResponse:
        synthetic = PaymentResponse(
            from_account=payload.get("fromAccount"),
            to_account=payload.get("toAccount"),
            amount=payload.get("amount"),
            currency=payload.get("currency"),
            payment_type=payload.get("paymentType"),
            status=PaymentStatus.FAILED,
            message="Payment processing failed",
            failure_reason=_FALLBACK_FAILURE_REASON,
        )
        raise unavailable_error(
            PAYMENT_PROCESSOR_SERVICE, "submit_payment", exc, fallback_response=synthetic
        )

    def _status_fallback(self, transaction_id: str, exc: Exception) -> PaymentResponse | None:
        raise unavailable_error(PAYMENT_PROCESSOR_SERVICE, "get_status", exc)
