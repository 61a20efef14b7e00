"""Password reset service.

Resets are done with the service-role client: the account is found by
listing users, its password is replaced with a short random one, and the new
password is "emailed" by writing it to the server log. There is no real mail
channel yet.
"""

import logging
import random
import re
import string

from supabase import AsyncClient

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(
    r'^(([^<>()[\]\\.,;:\s@"]+(\.[^<>()[\]\\.,;:\s@"]+)*)|(".+"))'
    r"@((\[[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\])"
    r"|(([a-zA-Z\-0-9]+\.)+[a-zA-Z]{2,}))$"
)

PASSWORD_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits
PASSWORD_LENGTH = 8

# Page size when scanning auth users for an email match.
LIST_USERS_PAGE_SIZE = 1000


class UserNotRegistered(Exception):
    """No auth user has the requested email."""


def is_valid_email(email: str | None) -> bool:
    """Check email shape. Does not check that the mailbox exists."""
    return bool(email) and EMAIL_PATTERN.match(email) is not None


def generate_password(length: int = PASSWORD_LENGTH) -> str:
    """Random alphanumeric password, e.g. ``A9fK2M7x``.

    Not cryptographically strong; the user is forced to change it on login.
    """
    return "".join(random.choices(PASSWORD_ALPHABET, k=length))


async def find_user_by_email(admin: AsyncClient, email: str):
    """Scan auth users page by page for a case-insensitive email match."""
    wanted = email.lower()
    page = 1
    while True:
        users = await admin.auth.admin.list_users(page=page, per_page=LIST_USERS_PAGE_SIZE)
        for user in users:
            if (user.email or "").lower() == wanted:
                return user
        if len(users) < LIST_USERS_PAGE_SIZE:
            return None
        page += 1


def send_password_email(email: str, password: str) -> None:
    """Simulated delivery: the new password goes to the server log."""
    logger.info("=" * 59)
    logger.info(f"[EMAIL SIMULATION] To: {email}")
    logger.info("Subject: Your New Password")
    logger.info(f"Body: Your new password is: {password}")
    logger.info("Please log in and change it immediately.")
    logger.info("=" * 59)


async def reset_password(admin: AsyncClient, email: str) -> str:
    """Overwrite the account's password and deliver the new one.

    Returns the new password. Raises ``UserNotRegistered`` if no account
    matches; platform errors propagate unchanged.
    """
    user = await find_user_by_email(admin, email)
    if user is None:
        raise UserNotRegistered(email)

    password = generate_password()
    metadata = dict(user.user_metadata or {})
    metadata["force_password_change"] = True

    await admin.auth.admin.update_user_by_id(
        user.id,
        {"password": password, "user_metadata": metadata},
    )
    logger.info(f"Password reset for user {user.id}")

    send_password_email(email, password)
    return password
