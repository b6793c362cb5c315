"""API error handling

Maps domain exceptions and request validation failures to the JSON error
body used by every endpoint:

    {"error": {"code": ..., "message": ..., "reason": ..., "validation_errors": {...}}}
"""

import logging
from typing import Dict, Optional, Type

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from src.api.schemas.transaction_request import FIELD_LABELS
from src.domain.exceptions import (
    TransactionError,
    TransactionNotFoundError,
    DuplicatedTransactionError,
    ValidationFailureError,
    StoreUnavailableError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: Dict[Type[TransactionError], int] = {
    TransactionNotFoundError: status.HTTP_404_NOT_FOUND,
    DuplicatedTransactionError: status.HTTP_409_CONFLICT,
    ValidationFailureError: status.HTTP_400_BAD_REQUEST,
    StoreUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
}

_VALUE_ERROR_PREFIX = "Value error, "


class ErrorDetail(BaseModel):
    code: str
    message: str
    reason: Optional[str] = None
    validation_errors: Optional[Dict[str, str]] = None


class ClientError(Exception):
    """Raised by routes to return an error body with an explicit status"""

    def __init__(self, error: ErrorDetail, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code


def _error_response(error: ErrorDetail, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error.model_dump(exclude_none=True)},
    )


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    logger.warning("Client error on %s %s: %s", request.method, request.url.path, exc.error.message)
    return _error_response(exc.error, exc.status_code)


async def transaction_error_handler(request: Request, exc: TransactionError) -> JSONResponse:
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for error_type, mapped_status in _STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            status_code = mapped_status
            break

    logger.error("%s on %s %s: %s", exc.code, request.method, request.url.path, exc.message)
    error = ErrorDetail(
        code=exc.code,
        message=exc.message,
        validation_errors=getattr(exc, "validation_errors", None) or None,
    )
    # Store internals are not exposed to clients
    if not isinstance(exc, StoreUnavailableError):
        error.reason = exc.reason
    return _error_response(error, status_code)


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Turn FastAPI validation errors into a per-field message map"""
    validation_errors: Dict[str, str] = {}
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or "body"
        if err.get("type") == "missing" and field in FIELD_LABELS:
            message = f"{FIELD_LABELS[field]} is required"
        else:
            message = err.get("msg", "Invalid value")
            if message.startswith(_VALUE_ERROR_PREFIX):
                message = message[len(_VALUE_ERROR_PREFIX):]
        validation_errors.setdefault(field, message)

    logger.error("Request validation failed on %s %s: %s", request.method, request.url.path, validation_errors)
    error = ErrorDetail(
        code=ValidationFailureError.code,
        message="Input validation failed for one or more fields",
        validation_errors=validation_errors,
    )
    return _error_response(error, status.HTTP_400_BAD_REQUEST)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    error = ErrorDetail(code="INTERNAL_ERROR", message="Internal Server Error")
    return _error_response(error, status.HTTP_500_INTERNAL_SERVER_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ClientError, client_error_handler)
    app.add_exception_handler(TransactionError, transaction_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
