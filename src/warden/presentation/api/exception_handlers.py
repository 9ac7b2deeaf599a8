"""Centralized error responses for the FastAPI application.

Use cases return ``Err`` values; routers turn them into responses with
``error_response``. Malformed requests and unexpected exceptions are
handled by the handlers registered in ``setup_exception_handlers``.

Error Response Format:
    {
        "detail": "Human-readable error message",
        "code": "MACHINE_READABLE_ERROR_CODE"
    }
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from warden_identity.domain.shared import Err, ErrorKind

logger = logging.getLogger(__name__)


ERROR_KIND_TO_STATUS: dict[ErrorKind, int] = {
    # 400 Bad Request
    ErrorKind.VALIDATION_FAILURE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CODE_EXPIRED: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CODE_MISMATCH: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_OR_EXPIRED_TOKEN: status.HTTP_400_BAD_REQUEST,
    # 401 Unauthorized
    ErrorKind.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.INVALID_TOKEN: status.HTTP_401_UNAUTHORIZED,
    # 403 Forbidden
    ErrorKind.NOT_VERIFIED: status.HTTP_403_FORBIDDEN,
    # 404 Not Found
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    # 409 Conflict
    ErrorKind.DUPLICATE_ACCOUNT: status.HTTP_409_CONFLICT,
    ErrorKind.ALREADY_VERIFIED: status.HTTP_409_CONFLICT,
    # 500 Internal Server Error
    ErrorKind.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _create_error_response(
    status_code: int,
    message: str,
    code: str,
) -> JSONResponse:
    """Create a standardized error response."""
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": message,
            "code": code,
        },
    )


def error_response(err: Err) -> JSONResponse:
    """Map a failed use-case result to its HTTP response."""
    return _create_error_response(
        status_code=ERROR_KIND_TO_STATUS.get(
            err.kind,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        ),
        message=err.message,
        code=err.kind.value,
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI application.

    Parameters
    ----------
    app
        The FastAPI application instance
    """

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Report malformed request bodies as 400 instead of 422."""
        errors = exc.errors()
        first = errors[0] if errors else {}
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = first.get("msg", "Invalid request")
        if location:
            message = f"{location}: {message}"

        logger.debug(
            "Rejected request on %s %s: %s",
            request.method,
            request.url.path,
            message,
        )
        return _create_error_response(
            status_code=status.HTTP_400_BAD_REQUEST,
            message=message,
            code=ErrorKind.VALIDATION_FAILURE.value,
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unhandled exceptions with consistent error format."""
        logger.exception(
            "Unhandled exception on %s %s: %s",
            request.method,
            request.url.path,
            exc,
        )
        return _create_error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="An internal error occurred",
            code=ErrorKind.INTERNAL_ERROR.value,
        )
