"""Rate limiting for the public auth endpoints (login, password reset, registration)."""

import logging

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse

from config import get_settings

logger = logging.getLogger(__name__)

# Keyed on client IP; RATE_LIMIT_ENABLED=false turns every limit off
limiter = Limiter(
    key_func=get_remote_address,
    enabled=get_settings().rate_limit_enabled,
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """429 in the public endpoints' ``{"error": ...}`` envelope."""
    logger.warning(
        f"Rate limit hit on {request.url.path} from {get_remote_address(request)}: {exc.detail}"
    )
    return JSONResponse(
        status_code=429,
        content={
            "error": "Too many requests. Please try again later.",
            "retry_after": exc.detail,
        }
    )
