import os
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("CLOUDINARY_CLOUD_NAME", "test-cloud")
os.environ.setdefault("CLOUDINARY_API_KEY", "123456")
os.environ.setdefault("CLOUDINARY_API_SECRET", "test-cloudinary-secret")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("LOGIN_TIMEOUT_SECONDS", "2")

import pytest
from fastapi.testclient import TestClient

from fakes import FakeSupabase


@pytest.fixture()
def fake_db():
    return FakeSupabase()


@pytest.fixture()
def api_client():
    # Lifespan is not entered, so no platform connection is attempted.
    import main as main_module

    client = TestClient(main_module.app)
    try:
        yield client
    finally:
        main_module.app.dependency_overrides.clear()


@pytest.fixture()
def login_as(api_client, fake_db):
    """Authenticate requests as a user with the given role, backed by fake_db."""
    import main as main_module
    from middleware.auth import get_current_user, get_user_db
    from models.user import UserProfile

    def _login_as(role, user_id="user-1", email="user@example.com"):
        profile = UserProfile(id=user_id, email=email, role=role)

        async def fake_user_db():
            yield fake_db

        main_module.app.dependency_overrides[get_user_db] = fake_user_db
        main_module.app.dependency_overrides[get_current_user] = lambda: profile
        return profile

    return _login_as


@pytest.fixture()
def anon_db(fake_db):
    """Serve fake_db to the unauthenticated flows (login, sign-up)."""
    import main as main_module
    from database import get_db

    async def fake_get_db():
        yield fake_db

    main_module.app.dependency_overrides[get_db] = fake_get_db
    return fake_db
