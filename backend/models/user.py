"""User profile model."""

import enum
from datetime import datetime

from models.base import Row


class UserRole(str, enum.Enum):
    """Application roles stored on the users row."""
    ADMIN = "admin"
    MARKETING = "marketing"      # Brand accounts
    INFLUENCER = "influencer"


VALID_ROLES = frozenset(UserRole)


class UserProfile(Row):
    """Row of the public users table, keyed by the auth user id."""

    id: str
    email: str | None = None
    role: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
