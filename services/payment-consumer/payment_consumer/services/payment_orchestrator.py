from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Protocol

from opentelemetry import trace

from payment_consumer.core.errors import (
    InvalidArgumentError,
    PaymentProcessingError,
    ResourceNotFoundError,
    ServiceUnavailableError,
)
from payment_consumer.core.metrics import (
    beneficiary_validation_skipped,
    payments_rejected,
    payments_submitted,
)
from shared.contracts import (
    Account,
    AccountStatus,
    Beneficiary,
    PaymentRequest,
    PaymentResponse,
    PaymentType,
)
from shared.logging import get_logger, mask_account_number, update_correlation_context
from shared.logging.fields import (
    BENEFICIARY_ID,
    CUSTOMER_ID,
    PAYMENT_TYPE,
    SERVICE_NAME,
    STATUS,
    TRANSACTION_ID,
)
from shared.observability import attributes
from shared.utils import ensure_currency_code, is_blank, require_positive_amount, require_text

logger = get_logger(__name__)


class AccountStore(Protocol):
    def get_by_customer_id(self, customer_id: str) -> Account | None: ...


class BeneficiaryGateway(Protocol):
    async def list_beneficiaries(
        self, customer_id: str, account_number: str | None = None
    ) -> list[Beneficiary]: ...

    async def get_beneficiary(
        self, beneficiary_id: int, customer_id: str
    ) -> Beneficiary | None: ...


class PaymentGateway(Protocol):
    async def submit_payment(
        self, payload: dict[str, Any], idempotency_key: str | None = None
    ) -> PaymentResponse: ...

    async def get_status(self, transaction_id: str) -> PaymentResponse | None: ...


@dataclass(frozen=True)
class ValidatedPayment:
    customer_id: str
    from_account: str
    to_account: str
    amount: Decimal
    currency: str
    payment_type: PaymentType
    description: str | None
    beneficiary_id: int | None


class PaymentOrchestrator:
    """Validates customer requests against local accounts and drives the downstream calls.

    A payment runs strictly in order: structural checks, account checks, the
    optional beneficiary check, then submission. Only a ``ServiceUnavailableError``
    from the beneficiary lookup is tolerated; the payment then proceeds without
    beneficiary validation so an outage of that service does not block payments.
    """

    def __init__(
        self,
        accounts: AccountStore,
        beneficiary_gateway: BeneficiaryGateway,
        payment_gateway: PaymentGateway,
    ) -> None:
        self._accounts = accounts
        self._beneficiary_gateway = beneficiary_gateway
        self._payment_gateway = payment_gateway
        self._tracer = trace.get_tracer(__name__)

    def get_account_details(self, customer_id: str) -> Account:
        customer_id = self._require(customer_id, "Customer ID")
        logger.info("account_details_requested", extra={"extra_fields": {CUSTOMER_ID: customer_id}})
        return self._require_account(customer_id)

    async def get_beneficiaries(
        self, customer_id: str, account_number: str | None = None
    ) -> list[Beneficiary]:
        customer_id = self._require(customer_id, "Customer ID")
        update_correlation_context({CUSTOMER_ID: customer_id})
        self._require_account(customer_id)

        beneficiaries = await self._beneficiary_gateway.list_beneficiaries(
            customer_id, account_number
        )
        if beneficiaries is None:
            raise ResourceNotFoundError(f"No beneficiaries found for customer: {customer_id}")
        logger.info(
            "beneficiaries_retrieved",
            extra={"extra_fields": {CUSTOMER_ID: customer_id, "count": len(beneficiaries)}},
        )
        return beneficiaries

    async def process_payment(
        self, request: PaymentRequest, idempotency_key: str | None = None
    ) -> PaymentResponse:
        if request is None:
            raise InvalidArgumentError("Payment request cannot be null")

        with self._tracer.start_as_current_span("validate_request"):
            payment = self._validate_request(request)
        update_correlation_context(
            {CUSTOMER_ID: payment.customer_id, PAYMENT_TYPE: payment.payment_type.value}
        )
        logger.info(
            "payment_processing_started",
            extra={
                "extra_fields": {
                    "from_account": mask_account_number(payment.from_account),
                    "to_account": mask_account_number(payment.to_account),
                    "amount": payment.amount,
                    "currency": payment.currency,
                }
            },
        )

        with self._tracer.start_as_current_span("validate_account") as span:
            span.set_attribute(attributes.CUSTOMER_ID, payment.customer_id)
            self._validate_account(payment)

        if payment.beneficiary_id is not None:
            with self._tracer.start_as_current_span("validate_beneficiary") as span:
                span.set_attribute(attributes.BENEFICIARY_ID, payment.beneficiary_id)
                await self._validate_beneficiary(payment)

        payload = self._build_processor_payload(payment)
        with self._tracer.start_as_current_span("submit_payment") as span:
            span.set_attribute(attributes.PAYMENT_TYPE, payment.payment_type.value)
            response = await self._payment_gateway.submit_payment(payload, idempotency_key)
            status = response.status.value if response.status else "UNKNOWN"
            span.set_attribute(attributes.PAYMENT_STATUS, status)

        payments_submitted.add(1, {"status": status, "payment_type": payment.payment_type.value})
        update_correlation_context({TRANSACTION_ID: response.transaction_id or ""})
        logger.info("payment_processed", extra={"extra_fields": {STATUS: status}})
        return response

    async def get_payment_status(self, transaction_id: str, customer_id: str) -> PaymentResponse:
        transaction_id = self._require(transaction_id, "Transaction ID")
        customer_id = self._require(customer_id, "Customer ID")
        update_correlation_context({CUSTOMER_ID: customer_id, TRANSACTION_ID: transaction_id})
        self._require_account(customer_id)

        response = await self._payment_gateway.get_status(transaction_id)
        if response is None:
            raise ResourceNotFoundError(f"Payment not found for transaction ID: {transaction_id}")
        return response

    def _require(self, value: str | None, field_name: str) -> str:
        if is_blank(value):
            raise InvalidArgumentError(f"{field_name} cannot be null or empty")
        return value.strip()

    def _require_account(self, customer_id: str) -> Account:
        account = self._accounts.get_by_customer_id(customer_id)
        if account is None:
            raise ResourceNotFoundError(f"Account not found for customer: {customer_id}")
        return account

    def _validate_request(self, request: PaymentRequest) -> ValidatedPayment:
        try:
            customer_id = require_text(request.customer_id, field_name="Customer ID")
            from_account = require_text(request.from_account, field_name="From account")
            to_account = require_text(request.to_account, field_name="To account")
            amount = require_positive_amount(request.amount)
            currency = ensure_currency_code(request.currency)
        except ValueError as exc:
            raise InvalidArgumentError(str(exc)) from exc
        if request.payment_type is None:
            raise InvalidArgumentError("Payment type is required")
        return ValidatedPayment(
            customer_id=customer_id,
            from_account=from_account,
            to_account=to_account,
            amount=amount,
            currency=currency,
            payment_type=request.payment_type,
            description=request.description,
            beneficiary_id=request.beneficiary_id,
        )

    def _validate_account(self, payment: ValidatedPayment) -> None:
        account = self._require_account(payment.customer_id)
        if account.account_number != payment.from_account:
            raise self._rejected("account_mismatch", "From account does not belong to customer")
        if account.status is None or account.status.upper() != AccountStatus.ACTIVE.value:
            raise self._rejected("account_inactive", "Account is not active")
        if account.balance is not None and account.balance < payment.amount:
            raise self._rejected("insufficient_balance", "Insufficient balance")

    async def _validate_beneficiary(self, payment: ValidatedPayment) -> None:
        try:
            beneficiary = await self._beneficiary_gateway.get_beneficiary(
                payment.beneficiary_id, payment.customer_id
            )
        except ServiceUnavailableError as exc:
            beneficiary_validation_skipped.add(1, {"reason": exc.category.value})
            logger.warning(
                "beneficiary_validation_skipped",
                extra={
                    "extra_fields": {
                        BENEFICIARY_ID: payment.beneficiary_id,
                        SERVICE_NAME: exc.service_name,
                        "error_category": exc.category.value,
                    }
                },
            )
            return

        if beneficiary is None:
            raise ResourceNotFoundError(
                f"Beneficiary not found with ID: {payment.beneficiary_id}"
            )
        if (
            not is_blank(beneficiary.beneficiary_account_number)
            and beneficiary.beneficiary_account_number != payment.to_account
        ):
            raise self._rejected(
                "beneficiary_mismatch",
                "Beneficiary account number does not match payment to account",
            )
        if beneficiary.status is None or beneficiary.status.upper() != AccountStatus.ACTIVE.value:
            raise self._rejected("beneficiary_inactive", "Beneficiary is not active")

    def _build_processor_payload(self, payment: ValidatedPayment) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "fromAccount": payment.from_account,
            "toAccount": payment.to_account,
            "amount": payment.amount,
            "currency": payment.currency,
            "paymentType": payment.payment_type.name,
        }
        if payment.description is not None:
            payload["description"] = payment.description
        return payload

    def _rejected(self, reason: str, message: str) -> PaymentProcessingError:
        payments_rejected.add(1, {"reason": reason})
        return PaymentProcessingError(message)
