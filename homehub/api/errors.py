"""
Error Handlers
Custom exception handlers for FastAPI.
"""

import logging
from typing import List, Union
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base exception for API errors."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ResourceNotFoundError(APIError):
    """Exception raised when resource is not found."""

    def __init__(self, resource: str, resource_id: Union[int, str]):
        super().__init__(
            message=f"{resource} not found: {resource_id}",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource": resource, "id": str(resource_id)},
        )


class InvalidRequestError(APIError):
    """Exception raised for invalid requests."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message=message, status_code=status.HTTP_400_BAD_REQUEST, details=details)


class PermissionDeniedError(APIError):
    """Exception raised when the caller may not perform an action."""

    def __init__(self, message: str = "Permission denied", details: dict = None):
        super().__init__(message=message, status_code=status.HTTP_403_FORBIDDEN, details=details)


class ConflictError(APIError):
    """Exception raised when a request conflicts with existing data."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message=message, status_code=status.HTTP_409_CONFLICT, details=details)


class InvalidTransitionError(ConflictError):
    """Exception raised for a status change the lifecycle does not allow."""

    def __init__(self, current: str, requested: str, allowed: List[str]):
        super().__init__(
            message=f"Cannot change status from '{current}' to '{requested}'",
            details={"from": current, "to": requested, "allowed": allowed},
        )


class DraftExpiredError(APIError):
    """Exception raised when publishing a draft past its expiry."""

    def __init__(self, draft_id: Union[int, str]):
        super().__init__(
            message="Draft has expired",
            status_code=status.HTTP_410_GONE,
            details={"id": str(draft_id)},
        )


class MediaUploadError(APIError):
    """Exception raised when an image cannot be decoded or stored."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message=message, status_code=status.HTTP_400_BAD_REQUEST, details=details)


def _error_response(status_code: int, message, error_type: str, details=None, headers=None) -> JSONResponse:
    error = {"message": message, "type": error_type}
    if details is not None:
        error["details"] = details
    return JSONResponse(status_code=status_code, content={"error": error}, headers=headers)


def _log_context(request: Request, **extra) -> dict:
    return {
        "path": request.url.path,
        "method": request.method,
        "request_id": getattr(request.state, "request_id", None),
        **extra,
    }


def setup_error_handlers(app: FastAPI) -> None:
    """
    Register the JSON error envelope for every failure path.

    All errors are returned as ``{"error": {"message", "type", "details"?}}``.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            f"{exc.__class__.__name__}: {exc.message}",
            extra=_log_context(request, status_code=exc.status_code, details=exc.details),
        )
        return _error_response(exc.status_code, exc.message, exc.__class__.__name__, exc.details)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        """Auth and permission failures from dependencies, plus unmatched routes."""
        return _error_response(
            exc.status_code, exc.detail, "HTTPException", headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Validation error: {exc}", extra=_log_context(request))

        errors = [
            {
                "loc": list(error.get("loc", [])),
                "msg": str(error.get("msg", "")),
                "type": error.get("type", ""),
            }
            for error in exc.errors()
        ]
        return _error_response(
            status.HTTP_422_UNPROCESSABLE_ENTITY, "Request validation failed", "ValidationError", errors
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        logger.warning(f"Value error: {exc}", extra=_log_context(request))
        return _error_response(status.HTTP_400_BAD_REQUEST, str(exc), "ValueError")

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unexpected error: {exc}", exc_info=True, extra=_log_context(request))
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "An unexpected error occurred", "InternalServerError"
        )
