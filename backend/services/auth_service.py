"""Authentication service - Supabase sign-in, profile lookup, JWT decoding."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

from jose import JWTError, jwt
from postgrest.exceptions import APIError
from pydantic import BaseModel
from supabase import AsyncClient, AuthError

from config import get_settings
from database import SupabaseStore, first_row
from models.user import VALID_ROLES, UserRole

logger = logging.getLogger(__name__)
settings = get_settings()

_VALID_ROLE_VALUES = {role.value for role in VALID_ROLES}


class TokenData(BaseModel):
    """Identity extracted from a Supabase access token."""
    user_id: str
    email: str | None = None


class TokenPair(BaseModel):
    """Access and refresh token pair."""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int | None = None


class LoginResult(BaseModel):
    """Outcome of a login attempt. Failures carry a single error string."""
    success: bool
    role: str | None = None
    error: str | None = None
    user_id: str | None = None
    access_token: str | None = None
    refresh_token: str | None = None


class AuthFailure(Exception):
    """A platform auth call failed; message is shown to the user as-is."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def already_registered(self) -> bool:
        return "already registered" in self.message.lower()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class AuthService:
    """Login, sign-up and session helpers on top of the Supabase client."""

    @staticmethod
    def decode_token(token: str) -> Optional[TokenData]:
        """Decode a Supabase access token locally with the project JWT secret."""
        try:
            payload = jwt.decode(
                token,
                settings.supabase_jwt_secret,
                algorithms=[settings.jwt_algorithm],
                audience="authenticated",
            )
        except JWTError:
            return None

        user_id = payload.get("sub")
        if user_id is None:
            return None
        return TokenData(user_id=user_id, email=payload.get("email"))

    @staticmethod
    async def verify_access_token(token: str) -> Optional[TokenData]:
        """Verify an access token.

        Decoded locally when SUPABASE_JWT_SECRET is set, otherwise checked
        against the platform.
        """
        if settings.supabase_jwt_secret:
            return AuthService.decode_token(token)

        client = await SupabaseStore.get_client()
        try:
            response = await client.auth.get_user(token)
        except AuthError as e:
            logger.info(f"Access token rejected: {e.message}")
            return None

        if response is None or response.user is None:
            return None
        return TokenData(user_id=response.user.id, email=response.user.email)

    @staticmethod
    async def fetch_or_create_profile(
        db: AsyncClient,
        user_id: str,
        email: str | None,
        role: UserRole | None = None,
    ) -> dict | None:
        """Fetch the users row for an auth user, creating it if missing."""
        response = await db.table("users").select("*").eq("id", user_id).limit(1).execute()
        profile = first_row(response)
        if profile is not None:
            return profile

        logger.warning(f"User profile missing for {user_id}. Creating...")
        row = {
            "id": user_id,
            "email": email,
            "created_at": _now(),
            "updated_at": _now(),
        }
        if role is not None:
            row["role"] = role.value
        response = await db.table("users").insert(row).execute()
        return first_row(response)

    @staticmethod
    async def login(
        db: AsyncClient,
        email: str,
        password: str,
        expected_role: UserRole | None = None,
    ) -> LoginResult:
        """Sign in and check the account's role.

        Never raises: every failure, including a timeout, comes back as
        ``LoginResult(success=False, error=...)``.
        """
        try:
            return await asyncio.wait_for(
                AuthService._attempt_login(db, email, password, expected_role),
                timeout=settings.login_timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Login timed out for {email}")
            return LoginResult(
                success=False,
                error="Login timed out. Please check your connection.",
            )
        except Exception as e:
            logger.error(f"Login logic error: {e}")
            await AuthService.sign_out(db)
            return LoginResult(
                success=False,
                error=str(e) or "An unexpected error occurred.",
            )

    @staticmethod
    async def _attempt_login(
        db: AsyncClient,
        email: str,
        password: str,
        expected_role: UserRole | None,
    ) -> LoginResult:
        try:
            response = await db.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthError as e:
            return LoginResult(success=False, error=e.message)

        session = response.session
        if session is None or response.user is None:
            return LoginResult(success=False, error="No user session created")

        user = response.user
        try:
            profile = await AuthService.fetch_or_create_profile(
                db, user.id, user.email, role=expected_role or UserRole.INFLUENCER
            )
        except APIError as e:
            logger.error(f"Failed to load or create profile: {e.message}")
            profile = None

        if profile is None:
            await AuthService.sign_out(db)
            return LoginResult(
                success=False,
                error="User profile verification failed. Contact support.",
            )

        role = profile.get("role")
        if role not in _VALID_ROLE_VALUES:
            logger.warning(f"Unauthorized role: {role}")
            await AuthService.sign_out(db)
            return LoginResult(success=False, error="Access Denied: Invalid user role.")

        if expected_role is not None and role != expected_role.value:
            logger.warning(f"Role mismatch. Expected {expected_role.value}, got {role}")
            await AuthService.sign_out(db)
            return LoginResult(
                success=False,
                error=f"Access Denied: Account is {role}, not {expected_role.value}.",
            )

        logger.info(f"Login successful: {user.id}")
        return LoginResult(
            success=True,
            role=role,
            user_id=user.id,
            access_token=session.access_token,
            refresh_token=session.refresh_token,
        )

    @staticmethod
    async def sign_up(
        db: AsyncClient,
        email: str,
        password: str,
        role: UserRole = UserRole.INFLUENCER,
    ) -> str:
        """Create the auth user and its users row. Returns the user id."""
        try:
            response = await db.auth.sign_up({"email": email, "password": password})
        except AuthError as e:
            logger.error(f"Signup error: {e.message}")
            raise AuthFailure(e.message)

        if response.user is None:
            raise AuthFailure(
                "Registration failed. Please check your email for a confirmation "
                "link or try again."
            )

        user_id = response.user.id
        try:
            await db.table("users").upsert(
                {
                    "id": user_id,
                    "email": email,
                    "role": role.value,
                    "created_at": _now(),
                    "updated_at": _now(),
                },
                on_conflict="id",
            ).execute()
        except APIError as e:
            logger.error(f"Profile creation error: {e.message}")
            raise AuthFailure("Failed to create user profile")

        return user_id

    @staticmethod
    async def refresh(db: AsyncClient, refresh_token: str) -> Optional[TokenPair]:
        """Exchange a refresh token for a new token pair."""
        try:
            response = await db.auth.refresh_session(refresh_token)
        except AuthError as e:
            logger.info(f"Refresh rejected: {e.message}")
            return None

        session = response.session
        if session is None:
            return None
        return TokenPair(
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            expires_in=session.expires_in,
        )

    @staticmethod
    async def sign_out(db: AsyncClient) -> None:
        """Drop the client's session. Errors are logged, never raised."""
        try:
            await db.auth.sign_out()
        except Exception as e:
            logger.error(f"Sign out error from Supabase: {e}")

    @staticmethod
    async def update_password(admin: AsyncClient, user_id: str, password: str) -> None:
        """Set a new password and clear any forced-change flag from a reset."""
        try:
            current = await admin.auth.admin.get_user_by_id(user_id)
            metadata = dict(current.user.user_metadata or {}) if current.user else {}
            metadata["force_password_change"] = False
            await admin.auth.admin.update_user_by_id(
                user_id,
                {"password": password, "user_metadata": metadata},
            )
        except AuthError as e:
            logger.error(f"Update password error: {e.message}")
            raise AuthFailure(e.message)

    @staticmethod
    async def revoke_session(admin: AsyncClient, access_token: str) -> None:
        """Revoke the refresh tokens behind an access token. Errors are logged."""
        try:
            await admin.auth.admin.sign_out(access_token)
        except AuthError as e:
            logger.error(f"Sign out error from Supabase: {e.message}")
