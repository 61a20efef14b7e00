"""Routers package."""

from .admin import router as admin_router
from .auth import router as auth_router
from .brand import router as brand_router
from .health import router as health_router
from .influencer import router as influencer_router
from .messages import router as messages_router
from .password_reset import router as password_reset_router
from .registration import router as registration_router
from .uploads import router as uploads_router

__all__ = [
    "admin_router",
    "auth_router",
    "brand_router",
    "health_router",
    "influencer_router",
    "messages_router",
    "password_reset_router",
    "registration_router",
    "uploads_router",
]
