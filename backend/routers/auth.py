"""Authentication router - login, logout, token refresh, password change."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials
from pydantic import BaseModel, EmailStr
from supabase import AsyncClient

from database import SupabaseStore, get_db
from middleware.auth import get_current_user, security
from middleware.rate_limit import limiter
from models.user import UserProfile, UserRole
from services.auth_service import AuthFailure, AuthService, LoginResult, TokenPair

router = APIRouter(prefix="/api/auth", tags=["auth"])

MIN_PASSWORD_LENGTH = 6


# Request/Response schemas
class LoginRequest(BaseModel):
    email: EmailStr
    password: str
    expected_role: UserRole | None = None


class RefreshRequest(BaseModel):
    refresh_token: str


class UpdatePasswordRequest(BaseModel):
    password: str
    confirm_password: str | None = None


class MessageResponse(BaseModel):
    message: str


# Endpoints
@router.post("/login", response_model=LoginResult)
@limiter.limit("5/minute")  # Max 5 login attempts per minute per IP
async def login(
    request: Request,  # Required for rate limiting - must be named 'request'
    login_data: LoginRequest,
    db: Annotated[AsyncClient, Depends(get_db)],
):
    """Login with email and password.

    Returns ``{success, role, error?}`` plus session tokens on success; the
    client redirects by role.
    """
    result = await AuthService.login(
        db, login_data.email, login_data.password, login_data.expected_role
    )
    if not result.success:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content=result.model_dump(exclude_none=True),
        )
    return result


@router.post("/refresh", response_model=TokenPair)
async def refresh_token(
    data: RefreshRequest,
    db: Annotated[AsyncClient, Depends(get_db)],
):
    """Get a new access token using a refresh token."""
    tokens = await AuthService.refresh(db, data.refresh_token)
    if tokens is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired refresh token",
        )
    return tokens


@router.post("/logout", response_model=MessageResponse)
async def logout(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    current_user: Annotated[UserProfile, Depends(get_current_user)],
):
    """Revoke the caller's session. Local state is cleared by the client."""
    admin = await SupabaseStore.get_admin_client()
    await AuthService.revoke_session(admin, credentials.credentials)
    return MessageResponse(message="Signed out")


@router.get("/me", response_model=UserProfile)
async def get_current_user_info(
    current_user: Annotated[UserProfile, Depends(get_current_user)],
):
    """Get current user information."""
    return current_user


@router.post("/update-password", response_model=MessageResponse)
async def update_password(
    data: UpdatePasswordRequest,
    current_user: Annotated[UserProfile, Depends(get_current_user)],
):
    """Change the caller's password, e.g. after a reset."""
    if len(data.password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.",
        )
    if data.confirm_password is not None and data.password != data.confirm_password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Passwords do not match.",
        )

    admin = await SupabaseStore.get_admin_client()
    try:
        await AuthService.update_password(admin, current_user.id, data.password)
    except AuthFailure as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    return MessageResponse(message="Password updated successfully!")
