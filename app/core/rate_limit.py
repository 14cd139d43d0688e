import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from app.core import error_codes
from app.core.config import settings

logger = logging.getLogger("uvicorn.error")

# Keyed by client address; routes with their own limit skip the default one.
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.RATE_LIMIT_DEFAULT],
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    enabled=settings.RATE_LIMIT_ENABLED,
)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Sync on purpose: SlowAPIMiddleware calls the handler without awaiting it."""
    logger.warning(f"Rate limit {exc.detail} exceeded by {get_remote_address(request)} on {request.url.path}")
    return JSONResponse(
        status_code=429,
        content={
            "detail": "Too many requests. Please try again later.",
            "error_code": error_codes.RATE_LIMITED,
        },
    )
