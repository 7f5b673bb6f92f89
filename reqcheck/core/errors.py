"""Service error values, HTTP materialization and exception handler registration."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any
import logging

from fastapi import FastAPI
from fastapi import Request
from fastapi import status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from reqcheck.schemas.error import UNDEFINED_KEY
from reqcheck.schemas.error import ErrorResponse
from reqcheck.schemas.error import FieldError

logger = logging.getLogger(__name__)

INVALID_REQUEST = "INVALID_REQUEST"
UNAUTHORIZED = "UNAUTHORIZED"
PERMISSION_DENIED = "PERMISSION_DENIED"
ITEM_NOT_FOUND = "ITEM_NOT_FOUND"
METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
REQUEST_FAILED = "REQUEST_FAILED"
INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class ServiceError(Exception):
    """An error list paired with the HTTP status it should be returned with."""

    def __init__(self, status_code: int, errors: Sequence[FieldError]) -> None:
        self.status_code = status_code
        self.errors = list(errors)
        super().__init__(str(self))

    def __str__(self) -> str:
        return f"Occurred {len(self.errors)} errors"

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(errors=self.errors)


def new_field_error(key: str, message: str, code: str, args: Sequence[str] | None = None) -> FieldError:
    """Build a field error without further checks on its arguments."""
    return FieldError(key=key, message=message, code=code, args=list(args) if args else [])


def undefined_key_error(code: str, message: str) -> FieldError:
    """Build a field error that is not tied to any request field."""
    return new_field_error(UNDEFINED_KEY, message, code)


def new_service_error(status_code: int, errors: Sequence[FieldError] | FieldError) -> ServiceError:
    if isinstance(errors, FieldError):
        errors = [errors]
    return ServiceError(status_code, errors)


def bad_request() -> ServiceError:
    return new_service_error(status.HTTP_400_BAD_REQUEST, undefined_key_error(INVALID_REQUEST, "Invalid request"))


def unauthorized() -> ServiceError:
    return new_service_error(status.HTTP_401_UNAUTHORIZED, undefined_key_error(UNAUTHORIZED, "Unauthorized user"))


def forbidden() -> ServiceError:
    return new_service_error(status.HTTP_403_FORBIDDEN, undefined_key_error(PERMISSION_DENIED, "Permission denied"))


def not_found(item_id: Any) -> ServiceError:
    """404 error carrying the missing identifier as its only argument."""
    return new_service_error(
        status.HTTP_404_NOT_FOUND,
        new_field_error(UNDEFINED_KEY, "Item not found", ITEM_NOT_FOUND, [str(item_id)]),
    )


def internal_error(payload: Any) -> ServiceError:
    """500 error for a recovered fault, with the stringified fault as argument."""
    return new_service_error(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        new_field_error(UNDEFINED_KEY, "Internal server error", INTERNAL_SERVER_ERROR, [str(payload)]),
    )


def write_error(error: ServiceError) -> JSONResponse:
    """Materialize a service error as a JSON response with its status code."""
    payload = error.to_response()
    return JSONResponse(status_code=error.status_code, content=payload.model_dump(mode="json", by_alias=True))


def _http_error_code(status_code: int) -> str:
    if status_code == status.HTTP_400_BAD_REQUEST:
        return INVALID_REQUEST
    if status_code == status.HTTP_401_UNAUTHORIZED:
        return UNAUTHORIZED
    if status_code == status.HTTP_403_FORBIDDEN:
        return PERMISSION_DENIED
    if status_code == status.HTTP_404_NOT_FOUND:
        return ITEM_NOT_FOUND
    if status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return METHOD_NOT_ALLOWED
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        return INTERNAL_SERVER_ERROR
    return REQUEST_FAILED


def _format_location(location: tuple[Any, ...] | list[Any] | Any) -> str:
    if not isinstance(location, (tuple, list)):
        return str(location)

    prefixes = {"body", "query", "path", "header", "cookie"}
    filtered = [str(part) for part in location if part not in prefixes]
    if filtered:
        return ".".join(filtered)

    if not location:
        return UNDEFINED_KEY

    return str(location[0])


def _validation_errors(exc: RequestValidationError) -> list[FieldError]:
    errors: list[FieldError] = []
    for issue in exc.errors():
        key = _format_location(issue.get("loc", ()))
        message = str(issue.get("msg") or "Invalid value")
        errors.append(new_field_error(key, message, INVALID_REQUEST))
    return errors


async def service_error_handler(_: Request, exc: ServiceError) -> JSONResponse:
    """Return explicit service errors in the shared envelope."""

    return write_error(exc)


async def request_validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    """Normalize FastAPI's own parameter validation to the shared envelope."""

    errors = _validation_errors(exc) or bad_request().errors
    return write_error(new_service_error(status.HTTP_400_BAD_REQUEST, errors))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Normalize router and framework HTTP exceptions to the shared envelope.

    404s carry the requested path as their argument, matching ``not_found``.
    """

    message = str(exc.detail) if isinstance(exc.detail, str) and exc.detail else "Request failed"
    args = [request.url.path] if exc.status_code == status.HTTP_404_NOT_FOUND else None
    error = new_field_error(UNDEFINED_KEY, message, _http_error_code(exc.status_code), args)
    return write_error(new_service_error(exc.status_code, error))


async def unhandled_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    """Last-resort conversion of an escaped exception to a 500 envelope."""

    logger.exception("Unhandled exception while serving request", exc_info=exc)
    return write_error(internal_error(exc))


def register_error_handlers(app: FastAPI) -> None:
    """Attach all error handlers to a FastAPI app instance."""

    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
