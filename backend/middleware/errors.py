"""Exception handlers.

The public /api endpoints answer ``{"error": "<message>"}`` instead of
FastAPI's ``{"detail": ...}``, and the message is passed through verbatim.
Uncaught backend query errors become a 400 carrying the platform's message.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from postgrest.exceptions import APIError

from database import SupabaseNotConfigured

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Raise from a handler to answer ``{"error": message}`` with a status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def not_configured_handler(request: Request, exc: SupabaseNotConfigured) -> JSONResponse:
    logger.error(f"{request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": str(exc)})


async def backend_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """A query rejected by the platform; its raw message goes back to the caller."""
    logger.error(f"{request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=400, content={"detail": exc.message or "Request failed"})
