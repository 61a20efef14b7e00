"""Supabase client handles.

The platform owns storage, auth and row-level security; this module only
builds and caches the clients that talk to it:

- a shared anon-key client for requests that carry no user session
  (health checks, access-token verification)
- a shared service-role client for administrative auth operations
- short-lived clients that hold exactly one user session or bearer token,
  so one caller's session never leaks into another caller's queries
"""

import logging
from typing import Any, AsyncIterator

from supabase import AsyncClient, acreate_client
from supabase.lib.client_options import AsyncClientOptions

from config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


class SupabaseNotConfigured(RuntimeError):
    """Raised when a client is requested without the credentials it needs."""


def _options(headers: dict[str, str] | None = None) -> AsyncClientOptions:
    # Server-side clients never persist or refresh sessions on their own.
    options = AsyncClientOptions(auto_refresh_token=False, persist_session=False)
    if headers:
        options.headers.update(headers)
    return options


def first_row(response: Any) -> dict | None:
    """Return the first row of a query response, or None."""
    rows = response.data or []
    if isinstance(rows, dict):
        return rows
    return rows[0] if rows else None


class SupabaseStore:
    """Process-wide cache of Supabase clients."""

    _client: AsyncClient | None = None
    _admin_client: AsyncClient | None = None

    @classmethod
    def check_credentials(cls) -> bool:
        """Warn (don't fail) when the platform credentials are missing."""
        if not settings.supabase_configured:
            logger.warning(
                "Supabase credentials are missing. Please add SUPABASE_URL and "
                "SUPABASE_ANON_KEY to your environment variables."
            )
            return False
        logger.info(f"Supabase initialized with URL: {settings.supabase_url}")
        return True

    @classmethod
    async def get_client(cls) -> AsyncClient:
        """Get or create the shared anon-key client."""
        if cls._client is None:
            if not settings.supabase_configured:
                raise SupabaseNotConfigured("Missing environment variables")
            cls._client = await acreate_client(
                settings.supabase_url,
                settings.supabase_anon_key,
                options=_options(),
            )
        return cls._client

    @classmethod
    async def get_admin_client(cls) -> AsyncClient:
        """Get or create the shared service-role client."""
        if cls._admin_client is None:
            if not settings.supabase_url or not settings.supabase_service_role_key:
                raise SupabaseNotConfigured(
                    "Server configuration error: Missing Service Role Key."
                )
            cls._admin_client = await acreate_client(
                settings.supabase_url,
                settings.supabase_service_role_key,
                options=_options(),
            )
        return cls._admin_client

    @classmethod
    async def session_client(cls) -> AsyncClient:
        """Create a fresh anon-key client that will hold a single session."""
        if not settings.supabase_configured:
            raise SupabaseNotConfigured("Missing environment variables")
        return await acreate_client(
            settings.supabase_url,
            settings.supabase_anon_key,
            options=_options(),
        )

    @classmethod
    async def user_client(cls, access_token: str) -> AsyncClient:
        """Create a client whose queries run as the token's owner."""
        if not settings.supabase_configured:
            raise SupabaseNotConfigured("Missing environment variables")
        return await acreate_client(
            settings.supabase_url,
            settings.supabase_anon_key,
            options=_options({"Authorization": f"Bearer {access_token}"}),
        )

    @classmethod
    async def health_check(cls) -> None:
        """Run a head-only count on users. Raises on any failure."""
        client = await cls.get_client()
        await client.table("users").select("count", count="exact", head=True).execute()

    @classmethod
    async def close(cls) -> None:
        """Close the cached clients' HTTP sessions."""
        for client in (cls._client, cls._admin_client):
            if client is not None:
                await close_client(client)
        cls._client = None
        cls._admin_client = None


async def close_client(client: AsyncClient) -> None:
    """Release the HTTP sessions (PostgREST and auth) of a client."""
    try:
        await client.postgrest.aclose()
        await client.auth.close()
    except Exception as e:
        logger.debug(f"Error closing Supabase client: {e}")


async def get_db() -> AsyncIterator[AsyncClient]:
    """Dependency: a fresh client for unauthenticated flows (login, sign-up)."""
    client = await SupabaseStore.session_client()
    try:
        yield client
    finally:
        await close_client(client)


async def get_admin_db() -> AsyncClient:
    """Dependency: the cached service-role client."""
    return await SupabaseStore.get_admin_client()
