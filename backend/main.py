"""Influencer Hub - FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from postgrest.exceptions import APIError
from slowapi.errors import RateLimitExceeded

from config import get_settings
from database import SupabaseNotConfigured, SupabaseStore
from middleware.errors import (
    ApiError,
    api_error_handler,
    backend_error_handler,
    not_configured_handler,
)
from middleware.rate_limit import limiter, rate_limit_exceeded_handler
from routers import (
    admin_router,
    auth_router,
    brand_router,
    health_router,
    influencer_router,
    messages_router,
    password_reset_router,
    registration_router,
    uploads_router,
)

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - check platform access on startup, close clients on shutdown."""
    if SupabaseStore.check_credentials():
        try:
            await SupabaseStore.health_check()
            print("✓ Supabase connection established")
        except Exception as e:
            print(f"⚠ Supabase not reachable: {e}")

    if not settings.supabase_service_role_key:
        print("⚠ SUPABASE_SERVICE_ROLE_KEY not set - password reset is disabled")
    if not settings.cloudinary_configured:
        print("⚠ Cloudinary credentials not set - uploads will fail")

    yield

    await SupabaseStore.close()


app = FastAPI(
    title=settings.app_name,
    description="Campaign and task management for admins, brands and influencers",
    version="0.1.0",
    lifespan=lifespan,
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# Error envelopes
app.add_exception_handler(ApiError, api_error_handler)
app.add_exception_handler(SupabaseNotConfigured, not_configured_handler)
app.add_exception_handler(APIError, backend_error_handler)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health_router)
app.include_router(password_reset_router)
app.include_router(uploads_router)
app.include_router(auth_router)
app.include_router(registration_router)
app.include_router(admin_router)
app.include_router(brand_router)
app.include_router(influencer_router)
app.include_router(messages_router)


@app.get("/health")
async def health_check():
    """Liveness endpoint. Does not touch the platform."""
    return {"status": "healthy", "service": "influencer-hub"}


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": settings.app_name,
        "version": "0.1.0",
        "docs": "/docs",
    }
