"""Password reset router - issues a temporary password for a registered email."""

import logging
from typing import Annotated

from fastapi import APIRouter, Body, Request
from pydantic import BaseModel

from database import SupabaseNotConfigured, SupabaseStore
from middleware.errors import ApiError
from middleware.rate_limit import limiter
from services.password_reset import UserNotRegistered, is_valid_email, reset_password

router = APIRouter(prefix="/api", tags=["auth"])
logger = logging.getLogger(__name__)


class MessageResponse(BaseModel):
    message: str


@router.post("/request-password-reset", response_model=MessageResponse)
@limiter.limit("5/minute")
async def request_password_reset(
    request: Request,  # Required for rate limiting - must be named 'request'
    data: Annotated[dict | None, Body()] = None,
):
    """Reset the account's password to a random one and log it.

    Finds the account by listing every auth user, so the cost grows with
    the user base.
    """
    email = (data or {}).get("email")
    email = email.strip() if isinstance(email, str) else ""
    if not is_valid_email(email):
        raise ApiError(400, "Please enter a valid email address.")

    try:
        admin = await SupabaseStore.get_admin_client()
    except SupabaseNotConfigured as e:
        logger.error("Missing SUPABASE_SERVICE_ROLE_KEY or SUPABASE_URL")
        raise ApiError(500, str(e))

    try:
        await reset_password(admin, email)
    except UserNotRegistered:
        raise ApiError(404, "This email is not registered.")
    except Exception as e:
        logger.error(f"Reset password API error: {e}")
        raise ApiError(500, getattr(e, "message", None) or str(e) or "Internal server error")

    return MessageResponse(message="Password reset successful. Check your email.")
