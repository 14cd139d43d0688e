from typing import Optional
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
import logging

from app.core import error_codes

logger = logging.getLogger("uvicorn.error")

class CustomHTTPException(Exception):
    """A custom HTTPException that we can use for additional context."""
    def __init__(self, status_code: int, detail: str, error_code: str = None, headers: dict = None):
        self.status_code = status_code
        self.detail = detail
        self.error_code = error_code
        self.headers = headers
        super().__init__(detail)  # Initialize the base Exception with the detail message


class AppError(CustomHTTPException):
    """Base for domain errors; subclasses pin the status code."""
    status_code = 500
    default_error_code: Optional[str] = None

    def __init__(self, detail: str, error_code: str = None, headers: dict = None):
        super().__init__(
            self.status_code,
            detail,
            error_code or self.default_error_code,
            headers,
        )


class InputError(AppError):
    """Malformed or out-of-range parameters."""
    status_code = 400
    default_error_code = error_codes.INVALID_INPUT


class AuthenticationError(AppError):
    status_code = 401
    default_error_code = error_codes.NOT_AUTHENTICATED

    def __init__(self, detail: str = "Not authenticated", error_code: str = None, headers: dict = None):
        super().__init__(detail, error_code, headers or {"WWW-Authenticate": "Bearer"})


class AuthorizationError(AppError):
    """Authenticated, but not allowed to act on the resource."""
    status_code = 403
    default_error_code = error_codes.UNAUTHORIZED_ACCESS


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    status_code = 409
    default_error_code = error_codes.CONNECTION_EXISTS


class DuplicateConnectionError(ConflictError):
    """Lost an insert race on the unique connection pair."""
    default_error_code = error_codes.DUPLICATE_CONNECTION

    def __init__(self, detail: str = "A connection between these users already exists", error_code: str = None):
        super().__init__(detail, error_code)


class DependencyError(AppError):
    """An external store or storage collaborator failed. Details stay in the logs."""
    default_error_code = error_codes.STORE_UNAVAILABLE

    def __init__(self, detail: str = "A backing service failed. Please try again later.", error_code: str = None):
        super().__init__(detail, error_code)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle validation errors and return a structured JSON response."""
    logger.error(f"Validation error on {request.url}: {exc.errors()}")

    errors = exc.errors()
    # Sanitize un-serializable objects in ctx
    for error in errors:
        ctx = error.get("ctx")
        if ctx and isinstance(ctx.get("error"), Exception):
            ctx["error"] = str(ctx["error"])

    return JSONResponse(
        status_code=400,
        content={
            "detail": errors,
            "error_code": error_codes.INVALID_INPUT,
            "message": "Validation failed. Please check your request data.",
        },
    )

async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Custom HTTP exception handler for better error responses."""
    if isinstance(exc, CustomHTTPException):
        if exc.status_code >= 500:
            logger.error(f"Server error on {request.url}: {exc.detail}")
        else:
            logger.info(f"HTTP {exc.status_code} on {request.url}: {exc.detail}")
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "error_code": exc.error_code
            },
            headers=exc.headers or {},
        )
    elif isinstance(exc, HTTPException):
        logger.error(f"HTTP error on {request.url}: {exc.detail}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=exc.headers or {},
        )

    logger.error(f"Unexpected error on {request.url}: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={"detail": "An unexpected error occurred"},
    )
