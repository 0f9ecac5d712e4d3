from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from payment_consumer.core.errors import (
    AppError,
    DownstreamTimeoutError,
    RequestTimeoutError,
    ServiceUnavailableError,
)
from shared.contracts.enums import ErrorCategory
from shared.logging import get_logger
from shared.resilience import RemoteCallTimeoutError
from shared.utils import utc_now

logger = get_logger(__name__)
_GENERIC_INTERNAL_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


def error_body(request: Request, *, category: str, message: str, status: int) -> dict[str, Any]:
    return {
        "error": {
            "category": category,
            "message": message,
            "path": request.url.path,
            "status": status,
            "timestamp": utc_now().isoformat(),
        }
    }


def _describe_validation_error(error: dict[str, Any]) -> str:
    location = [str(part) for part in error.get("loc", ())]
    if error.get("type") == "missing" and len(location) == 2 and location[0] == "query":
        return f"Required request parameter '{location[1]}' is not present"
    field = ".".join(part for part in location if part != "body")
    return f"{field}: {error.get('msg', 'invalid value')}" if field else error.get("msg", "")


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
        fields: dict[str, Any] = {"error_category": exc.category.value}
        if isinstance(exc, ServiceUnavailableError):
            fields["service_name"] = exc.service_name
            logger.error(
                "downstream_unavailable: %s", exc.message, extra={"extra_fields": fields}
            )
        else:
            logger.warning("application_error: %s", exc.message, extra={"extra_fields": fields})
        return JSONResponse(
            status_code=exc.http_status,
            content=error_body(
                request,
                category=exc.category.value,
                message=exc.public_message(),
                status=exc.http_status,
            ),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        message = ", ".join(_describe_validation_error(error) for error in exc.errors())
        logger.warning(
            "validation_error",
            extra={"extra_fields": {"error_category": ErrorCategory.VALIDATION_ERROR.value}},
        )
        return JSONResponse(
            status_code=400,
            content=error_body(
                request,
                category=ErrorCategory.VALIDATION_ERROR.value,
                message=message or "Invalid request",
                status=400,
            ),
        )

    @app.exception_handler(DownstreamTimeoutError)
    @app.exception_handler(RemoteCallTimeoutError)
    async def handle_timeout(request: Request, exc: Exception) -> JSONResponse:
        timeout = RequestTimeoutError()
        logger.error(
            "request_timeout",
            extra={"extra_fields": {"error_category": timeout.category.value}},
        )
        return JSONResponse(
            status_code=timeout.http_status,
            content=error_body(
                request,
                category=timeout.category.value,
                message=timeout.message,
                status=timeout.http_status,
            ),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "unexpected_error", extra={"extra_fields": {"error_category": "unexpected"}}
        )
        return JSONResponse(
            status_code=500,
            content=error_body(
                request,
                category="unexpected",
                message=_GENERIC_INTERNAL_ERROR_MESSAGE,
                status=500,
            ),
        )
