from __future__ import annotations

from dataclasses import dataclass

from shared.contracts import PaymentResponse
from shared.contracts.enums import ErrorCategory


@dataclass
class AppError(Exception):
    category: ErrorCategory
    message: str
    http_status: int = 400

    def public_message(self) -> str:
        return self.message


class InvalidArgumentError(AppError):
    def __init__(self, message: str) -> None:
        super().__init__(ErrorCategory.INVALID_REQUEST, message, http_status=400)


class ResourceNotFoundError(AppError):
    def __init__(self, message: str) -> None:
        super().__init__(ErrorCategory.RESOURCE_NOT_FOUND, message, http_status=404)


class PaymentProcessingError(AppError):
    def __init__(self, message: str) -> None:
        super().__init__(ErrorCategory.PAYMENT_PROCESSING_ERROR, message, http_status=400)


class ServiceUnavailableError(AppError):
    """A downstream service could not serve the request after the resilience policy ran.

    ``fallback_response`` holds the synthetic response composed by a fallback for
    diagnostics; it is never an authoritative result.
    """

    def __init__(
        self,
        service_name: str,
        message: str,
        *,
        fallback_response: PaymentResponse | None = None,
        category: ErrorCategory = ErrorCategory.SERVICE_UNAVAILABLE,
    ) -> None:
        super().__init__(category, message, http_status=503)
        self.service_name = service_name
        self.fallback_response = fallback_response

    def public_message(self) -> str:
        return (
            f"{self.service_name or 'Downstream'} service is currently unavailable. "
            "Please try again later."
        )


class CallNotPermittedError(ServiceUnavailableError):
    def __init__(
        self,
        service_name: str,
        message: str = "Circuit breaker is open",
        *,
        fallback_response: PaymentResponse | None = None,
    ) -> None:
        super().__init__(
            service_name,
            message,
            fallback_response=fallback_response,
            category=ErrorCategory.CIRCUIT_BREAKER_OPEN,
        )

    def public_message(self) -> str:
        return (
            "The service is temporarily unavailable due to multiple failures. "
            "Please try again later."
        )


class RequestTimeoutError(AppError):
    def __init__(
        self, message: str = "The request took too long to process. Please try again."
    ) -> None:
        super().__init__(ErrorCategory.REQUEST_TIMEOUT, message, http_status=408)


@dataclass
class DownstreamError(Exception):
    category: ErrorCategory
    message: str
    service_name: str = ""


class DownstreamTimeoutError(DownstreamError):
    def __init__(self, service_name: str, message: str = "Downstream timeout") -> None:
        super().__init__(ErrorCategory.DOWNSTREAM_TIMEOUT, message, service_name)


class DownstreamConnectionError(DownstreamError):
    def __init__(self, service_name: str, message: str = "Downstream connection error") -> None:
        super().__init__(ErrorCategory.DOWNSTREAM_CONNECTION_ERROR, message, service_name)


class DownstreamResponseError(DownstreamError):
    def __init__(
        self, service_name: str, message: str = "Downstream response could not be read"
    ) -> None:
        super().__init__(ErrorCategory.DOWNSTREAM_RESPONSE_ERROR, message, service_name)


class DownstreamHttpError(DownstreamError):
    def __init__(self, service_name: str, status_code: int) -> None:
        super().__init__(
            ErrorCategory.DOWNSTREAM_HTTP_ERROR,
            f"Downstream returned {status_code}",
            service_name,
        )
        self.status_code = status_code

    @property
    def is_server_error(self) -> bool:
        return self.status_code >= 500
