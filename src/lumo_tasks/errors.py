"""Application error taxonomy and FastAPI exception handlers."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any, Mapping

import pydantic
from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request

from .core.context import REQUEST_ID_HEADER, UNSET, request_scope
from .schemas.system import ErrorResponse

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error, try again later."


class ApplicationError(Exception):
    """Base class for domain-specific errors."""

    default_message = "Application error."
    default_code = "application_error"
    default_status_code = status.HTTP_400_BAD_REQUEST

    def __init__(
        self,
        message: str | None = None,
        *,
        code: str | None = None,
        status_code: int | None = None,
        details: Any | None = None,
    ) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)
        self.code = code or self.default_code
        self.status_code = status_code or self.default_status_code
        self.details = details


class ValidationError(ApplicationError):
    """A field failed its rules; only the first failure is reported."""

    default_message = "Validation failed."
    default_code = "validation_error"
    default_status_code = status.HTTP_400_BAD_REQUEST

    @classmethod
    def from_pydantic(cls, exc: pydantic.ValidationError) -> "ValidationError":
        return cls(first_error_message(exc.errors()))


class ConflictError(ApplicationError):
    default_message = "Resource already exists."
    default_code = "conflict"
    default_status_code = status.HTTP_409_CONFLICT


class NotFoundError(ApplicationError):
    default_message = "Resource not found."
    default_code = "not_found"
    default_status_code = status.HTTP_404_NOT_FOUND


class ForbiddenError(ApplicationError):
    default_message = "Forbidden action."
    default_code = "forbidden"
    default_status_code = status.HTTP_403_FORBIDDEN


class UnauthenticatedError(ApplicationError):
    """Missing or rejected credentials.

    Defaults to 401; invalid bearer tokens are reported with 403.
    """

    default_message = "Could not validate credentials."
    default_code = "unauthorized"
    default_status_code = status.HTTP_401_UNAUTHORIZED


class ServerError(ApplicationError):
    default_message = INTERNAL_ERROR_MESSAGE
    default_code = "server_error"
    default_status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def first_error_message(errors: list[Any]) -> str:
    """Render the first pydantic error as ``field: message``."""
    if not errors:
        return ValidationError.default_message
    error = errors[0]
    location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
    message = error.get("msg", ValidationError.default_message)
    if error.get("type") == "value_error":
        ctx_error = error.get("ctx", {}).get("error")
        if ctx_error is not None:
            message = str(ctx_error)
        return message
    return f"{location}: {message}" if location else message


_HTTP_STATUS_CODE_MAP: dict[int, str] = {
    status.HTTP_400_BAD_REQUEST: "bad_request",
    status.HTTP_401_UNAUTHORIZED: "unauthorized",
    status.HTTP_403_FORBIDDEN: "forbidden",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
    status.HTTP_409_CONFLICT: "conflict",
}


def _merge_details_with_request(request: Request, details: Any | None) -> Any | None:
    request_id = getattr(request.state, "request_id", None)
    if not request_id:
        return details
    if details is None:
        return {"request_id": request_id}
    if isinstance(details, dict):
        return {**details, "request_id": details.get("request_id", request_id)}
    return {"request_id": request_id, "detail": details}


def _error_response(
    request: Request,
    *,
    status_code: int,
    code: str,
    message: str,
    details: Any | None = None,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    payload = ErrorResponse(
        code=code,
        message=message,
        details=_merge_details_with_request(request, details),
    )
    response = JSONResponse(status_code=status_code, content=payload.model_dump(mode="json"))
    if headers:
        response.headers.update(headers)
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        response.headers.setdefault(REQUEST_ID_HEADER, request_id)
    return response


def _debug_errors_enabled(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None)
    return bool(getattr(settings, "debug_errors", False))


def register_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers with the provided FastAPI app."""

    @app.exception_handler(ApplicationError)
    async def _handle_application_error(request: Request, exc: ApplicationError) -> JSONResponse:
        log = logger.error if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR else logger.info
        log(
            "Application error: %s",
            exc.message,
            extra={"code": exc.code, "status_code": exc.status_code, "path": request.url.path},
        )
        return _error_response(
            request,
            status_code=exc.status_code,
            code=exc.code,
            message=exc.message,
            details=exc.details,
        )

    @app.exception_handler(RequestValidationError)
    async def _handle_request_validation_error(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        errors = list(exc.errors())
        message = first_error_message(errors)
        logger.info("Request validation failed: %s", message, extra={"path": request.url.path})
        return _error_response(
            request,
            status_code=status.HTTP_400_BAD_REQUEST,
            code="validation_error",
            message=message,
        )

    @app.exception_handler(IntegrityError)
    async def _handle_integrity_error(request: Request, exc: IntegrityError) -> JSONResponse:
        logger.warning("Database integrity error encountered.", exc_info=_debug_errors_enabled(request))
        return _error_response(
            request,
            status_code=status.HTTP_409_CONFLICT,
            code="conflict",
            message="Database integrity violation.",
        )

    @app.exception_handler(StarletteHTTPException)
    async def _handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        code = _HTTP_STATUS_CODE_MAP.get(exc.status_code, "http_error")
        if isinstance(exc.detail, str):
            message = exc.detail
        else:
            try:
                message = HTTPStatus(exc.status_code).phrase
            except ValueError:
                message = "Error"
        return _error_response(
            request,
            status_code=exc.status_code,
            code=code,
            message=message,
            headers=exc.headers or None,
        )

    @app.exception_handler(Exception)
    async def _handle_unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
        # Runs outside CorrelationIdMiddleware, so the logging context is rebound here.
        with request_scope(getattr(request.state, "request_id", UNSET)):
            if _debug_errors_enabled(request):
                logger.exception("Unhandled application error.")
            else:
                logger.error("Unhandled application error: %s", type(exc).__name__)
        return _error_response(
            request,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            code="server_error",
            message=INTERNAL_ERROR_MESSAGE,
        )


__all__ = [
    "ApplicationError",
    "ConflictError",
    "ForbiddenError",
    "NotFoundError",
    "ServerError",
    "UnauthenticatedError",
    "ValidationError",
    "first_error_message",
    "register_exception_handlers",
]
