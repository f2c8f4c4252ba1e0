"""
HTTP exception classes and error handling.

This module maps identity errors returned by the use cases onto HTTP
exceptions and registers the FastAPI handlers that render every failure
as an ``ErrorResponse``.
"""

import logging
from typing import Any, Dict, List, Optional, TypeVar

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from identity_api.config.settings import is_development
from identity_api.errors import (
    ConflictError,
    DatabaseError,
    ForbiddenError,
    IdentityError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from identity_api.result import Result
from identity_api.schemas.base import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)

T = TypeVar('T')


class APIException(HTTPException):
    """
    Base API exception class.

    Provides a standardized way to raise HTTP exceptions with
    detailed error information.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[List[ErrorDetail]] = None,
        headers: Optional[Dict[str, str]] = None
    ):
        """
        Initialize API exception.

        Args:
            status_code: HTTP status code
            message: Human-readable error message
            error_code: Machine-readable error code
            details: Detailed error information
            headers: Optional HTTP headers
        """
        self.message = message
        self.error_code = error_code
        self.details = details or []

        super().__init__(
            status_code=status_code,
            detail=self._create_detail(),
            headers=headers
        )

    def _create_detail(self) -> Dict[str, Any]:
        """Create detailed error information."""
        return {
            "message": self.message,
            "error_code": self.error_code,
            "details": [detail.model_dump() for detail in self.details] if self.details else None
        }


class ValidationException(APIException):
    """Exception for validation errors."""

    def __init__(
        self,
        message: str = "Validation failed",
        details: Optional[List[ErrorDetail]] = None
    ):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            message=message,
            error_code="VALIDATION_ERROR",
            details=details
        )


class AuthenticationException(APIException):
    """Exception for authentication errors."""

    def __init__(
        self,
        message: str = "Authentication failed",
        error_code: str = "UNAUTHORIZED"
    ):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            message=message,
            error_code=error_code,
            headers={"WWW-Authenticate": "Bearer"}
        )


class AuthorizationException(APIException):
    """Exception for authorization errors."""

    def __init__(
        self,
        message: str = "Access denied",
        error_code: str = "FORBIDDEN"
    ):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            message=message,
            error_code=error_code
        )


class NotFoundException(APIException):
    """Exception for resource not found errors."""

    def __init__(
        self,
        message: str = "Resource not found",
        error_code: str = "NOT_FOUND",
        details: Optional[List[ErrorDetail]] = None
    ):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            message=message,
            error_code=error_code,
            details=details
        )


class ConflictException(APIException):
    """Exception for resource conflict errors."""

    def __init__(
        self,
        message: str = "Resource conflict",
        error_code: str = "CONFLICT",
        details: Optional[List[ErrorDetail]] = None
    ):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            message=message,
            error_code=error_code,
            details=details
        )


class DatabaseException(APIException):
    """Exception for database-related errors."""

    def __init__(
        self,
        message: str = "Database operation failed",
        error_code: str = "DATABASE_ERROR"
    ):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message=message,
            error_code=error_code
        )


def error_to_exception(error: IdentityError) -> APIException:
    """
    Convert an identity error into the matching HTTP exception.

    Args:
        error: Error carried by an ``Err`` result

    Returns:
        API exception ready to be raised
    """
    if isinstance(error, ValidationError):
        return ValidationException(
            message=error.message,
            details=[ErrorDetail(field=error.field, message=error.reason, code=error.error_code)],
        )
    if isinstance(error, UnauthorizedError):
        return AuthenticationException(message=error.message, error_code=error.error_code)
    if isinstance(error, ForbiddenError):
        return AuthorizationException(message=error.message, error_code=error.error_code)
    if isinstance(error, NotFoundError):
        details = [
            ErrorDetail(field="id", message=f"{error.entity_type} '{missing_id}' not found", code=error.error_code)
            for missing_id in error.missing_ids
        ]
        return NotFoundException(message=error.message, error_code=error.error_code, details=details or None)
    if isinstance(error, ConflictError):
        return ConflictException(
            message=error.message,
            error_code=error.error_code,
            details=[ErrorDetail(field=error.field, message=error.message, code=error.error_code)],
        )
    if isinstance(error, DatabaseError):
        # The cause stays in the logs
        return DatabaseException(message=error.message, error_code=error.error_code)
    return APIException(
        status_code=error.http_status,
        message=error.message,
        error_code=error.error_code,
    )


def unwrap_or_raise(result: Result[T, IdentityError]) -> T:
    """
    Return the value of an ``Ok`` result or raise the HTTP form of its error.

    Args:
        result: Result returned by a use case

    Returns:
        The carried value

    Raises:
        APIException: If the result is an ``Err``
    """
    if result.is_err():
        error = result.error
        if isinstance(error, DatabaseError):
            logger.error(
                f"Database error: {error.message}",
                exc_info=error.cause,
                extra={"event_type": "database_error", "error_code": error.error_code},
            )
        raise error_to_exception(error)
    return result.value


def _render(
    request: Request,
    status_code: int,
    error_response: ErrorResponse,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    correlation_id = getattr(request.state, "correlation_id", None)
    if correlation_id:
        error_response.correlation_id = correlation_id

    response_headers = dict(headers or {})
    if correlation_id:
        response_headers["X-Correlation-ID"] = correlation_id

    return JSONResponse(
        status_code=status_code,
        content=error_response.model_dump(mode="json"),
        headers=response_headers or None,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle FastAPI request validation errors (malformed payloads).

    Args:
        request: FastAPI request object
        exc: Request validation error

    Returns:
        JSON response with error details
    """
    logger.warning(
        f"Validation error in {request.method} {request.url.path}",
        extra={
            "event_type": "validation_error",
            "method": request.method,
            "path": request.url.path,
        }
    )

    details = []
    for err in exc.errors():
        field_parts = [str(loc) for loc in err["loc"] if loc not in ("body", "query", "path", "header")]
        details.append(ErrorDetail(
            field=".".join(field_parts) if field_parts else None,
            message=err["msg"],
            code=err["type"],
        ))

    return _render(
        request,
        status.HTTP_400_BAD_REQUEST,
        ErrorResponse(message="Request validation failed", error_code="VALIDATION_ERROR", details=details),
    )


async def api_exception_handler(request: Request, exc: APIException) -> JSONResponse:
    """
    Handle API exceptions raised by routes and dependencies.

    Args:
        request: FastAPI request object
        exc: API exception

    Returns:
        JSON response with error details
    """
    log_level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(
        log_level,
        f"API exception in {request.method} {request.url.path}: {exc.message}",
        extra={
            "event_type": "api_exception",
            "method": request.method,
            "path": request.url.path,
            "status_code": exc.status_code,
            "error_code": exc.error_code,
        }
    )

    return _render(
        request,
        exc.status_code,
        ErrorResponse(message=exc.message, error_code=exc.error_code, details=exc.details or None),
        exc.headers,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    Handle plain HTTP exceptions (404 on unknown routes, 405, ...).
    """
    message = exc.detail if isinstance(exc.detail, str) else "HTTP error occurred"

    return _render(
        request,
        exc.status_code,
        ErrorResponse(message=message, error_code=f"HTTP_{exc.status_code}"),
        getattr(exc, "headers", None),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected exceptions.

    Args:
        request: FastAPI request object
        exc: Unhandled exception

    Returns:
        JSON response with a generic message outside development
    """
    logger.exception(
        f"Unhandled exception in {request.method} {request.url.path}",
        extra={
            "event_type": "unhandled_exception",
            "method": request.method,
            "path": request.url.path,
            "exception_type": type(exc).__name__,
        }
    )

    if is_development():
        message = str(exc) or "An unexpected error occurred"
        details = [ErrorDetail(field="exception", message=str(exc), code=type(exc).__name__)]
    else:
        message = "An internal server error occurred"
        details = None

    return _render(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorResponse(message=message, error_code="INTERNAL_SERVER_ERROR", details=details),
    )


def setup_exception_handlers(app) -> None:
    """
    Set up exception handlers for the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(APIException, api_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
