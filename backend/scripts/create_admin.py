#!/usr/bin/env python3
"""Create (or promote) an admin user for Influencer Hub.

Needs SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY.
"""

import asyncio
import sys
from datetime import datetime, timezone
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from supabase import AuthError

from database import SupabaseStore
from models.user import UserRole
from services.password_reset import find_user_by_email


async def create_admin(email: str, password: str):
    """Create an admin user, or give an existing account the admin role."""
    admin = await SupabaseStore.get_admin_client()
    try:
        user = await find_user_by_email(admin, email)
        if user is not None:
            print(f"User {email} already exists. Promoting to admin.")
        else:
            try:
                response = await admin.auth.admin.create_user({
                    "email": email,
                    "password": password,
                    "email_confirm": True,
                })
            except AuthError as e:
                print(f"Error creating user: {e.message}")
                return
            user = response.user

        now = datetime.now(timezone.utc).isoformat()
        await admin.table("users").upsert(
            {
                "id": user.id,
                "email": email,
                "role": UserRole.ADMIN.value,
                "updated_at": now,
            },
            on_conflict="id",
        ).execute()

        print("Admin ready!")
        print(f"  Email: {email}")
        print(f"  ID: {user.id}")
        print(f"  Role: {UserRole.ADMIN.value}")
    finally:
        await SupabaseStore.close()


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print("Usage: python3 create_admin.py <email> <password>")
        print("Example: python3 create_admin.py admin@example.com secretpassword")
        sys.exit(1)

    email = sys.argv[1]
    password = sys.argv[2]

    asyncio.run(create_admin(email, password))
