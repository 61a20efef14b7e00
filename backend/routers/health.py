"""Health check router - verifies the Supabase connection server-side."""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from config import get_settings
from database import SupabaseStore

router = APIRouter(prefix="/api", tags=["health"])
settings = get_settings()
logger = logging.getLogger(__name__)


@router.get("/health-check")
async def health_check():
    """Check credentials are set and the users table answers a head-only count."""
    if not settings.supabase_configured:
        return JSONResponse(
            status_code=500,
            content={"status": "error", "message": "Missing environment variables"},
        )

    try:
        await SupabaseStore.health_check()
    except Exception as e:
        message = getattr(e, "message", None) or str(e) or "Connection failed"
        logger.error(f"Health check failed: {message}")
        return JSONResponse(
            status_code=500,
            content={"status": "error", "message": message},
        )

    return {"status": "ok", "message": "Server-side connection successful"}
