"""Authentication middleware - bearer token verification and role gating."""

import logging
from typing import Annotated, AsyncIterator

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from postgrest.exceptions import APIError
from supabase import AsyncClient

from database import SupabaseStore, close_client
from models.user import UserProfile, UserRole
from services.auth_service import AuthService
from services.profiles import get_brand_for_user, get_influencer_for_user

logger = logging.getLogger(__name__)
security = HTTPBearer()


async def get_user_db(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
) -> AsyncIterator[AsyncClient]:
    """A client whose queries run as the caller, so row-level security applies."""
    client = await SupabaseStore.user_client(credentials.credentials)
    try:
        yield client
    finally:
        await close_client(client)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    db: Annotated[AsyncClient, Depends(get_user_db)],
) -> UserProfile:
    """Resolve the caller's users row from their Supabase access token.

    A valid token without a users row gets one created (with no role).
    """
    token_data = await AuthService.verify_access_token(credentials.credentials)
    if token_data is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired session",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        profile = await AuthService.fetch_or_create_profile(
            db, token_data.user_id, token_data.email
        )
    except APIError as e:
        logger.error(f"Profile fetch error: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=e.message,
        )

    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return UserProfile.model_validate(profile)


def require_roles(*roles: UserRole):
    """Create a dependency that requires one of the given roles."""
    allowed = {r.value for r in roles}

    async def role_checker(
        current_user: Annotated[UserProfile, Depends(get_current_user)],
    ) -> UserProfile:
        if current_user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Required role: {', '.join(r.value for r in roles)}",
            )
        return current_user
    return role_checker


async def get_current_influencer(
    current_user: Annotated[UserProfile, Depends(require_roles(UserRole.INFLUENCER))],
    db: Annotated[AsyncClient, Depends(get_user_db)],
) -> dict:
    """The caller's influencers row. 404 until the profile is completed."""
    influencer = await get_influencer_for_user(db, current_user.id)
    if influencer is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Influencer profile not found",
        )
    return influencer


async def get_current_brand(
    current_user: Annotated[UserProfile, Depends(require_roles(UserRole.MARKETING))],
    db: Annotated[AsyncClient, Depends(get_user_db)],
) -> dict:
    """The caller's brands row."""
    brand = await get_brand_for_user(db, current_user.id)
    if brand is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Brand profile not found",
        )
    return brand
