import asyncio
import logging

import pytest

import database
from database import SupabaseStore
from services import password_reset
from services.password_reset import (
    PASSWORD_LENGTH,
    UserNotRegistered,
    find_user_by_email,
    generate_password,
    is_valid_email,
    reset_password,
)


@pytest.fixture()
def admin_db(fake_db, monkeypatch):
    async def fake_get_admin_client():
        return fake_db

    monkeypatch.setattr(SupabaseStore, "get_admin_client", fake_get_admin_client)
    return fake_db


@pytest.mark.parametrize(
    "email",
    ["user@example.com", "first.last@sub.example.co.in", '"quoted name"@example.com'],
)
def test_is_valid_email_accepts(email):
    assert is_valid_email(email)


@pytest.mark.parametrize("email", ["", None, "plainaddress", "user@", "user@example", "a b@example.com"])
def test_is_valid_email_rejects(email):
    assert not is_valid_email(email)


def test_generate_password_is_alphanumeric():
    password = generate_password()
    assert len(password) == PASSWORD_LENGTH
    assert password.isalnum()
    assert password.isascii()


def test_find_user_by_email_is_case_insensitive_and_pages(fake_db, monkeypatch):
    monkeypatch.setattr(password_reset, "LIST_USERS_PAGE_SIZE", 2)
    for i in range(4):
        fake_db.auth.add_user(f"user{i}@example.com", "secret")
    wanted = fake_db.auth.add_user("Target@Example.com", "secret")

    found = asyncio.run(find_user_by_email(fake_db, "target@example.COM"))
    assert found is wanted

    assert asyncio.run(find_user_by_email(fake_db, "nobody@example.com")) is None


def test_reset_password_preserves_metadata(fake_db):
    user = fake_db.auth.add_user("user@example.com", "old-password", {"name": "Asha"})

    new_password = asyncio.run(reset_password(fake_db, "user@example.com"))

    user_id, attributes = fake_db.auth.admin.updates[-1]
    assert user_id == user.id
    assert attributes["password"] == new_password
    assert attributes["user_metadata"] == {"name": "Asha", "force_password_change": True}


def test_reset_password_unknown_email(fake_db):
    with pytest.raises(UserNotRegistered):
        asyncio.run(reset_password(fake_db, "ghost@example.com"))


def test_request_reset_rejects_invalid_email(api_client, admin_db):
    response = api_client.post("/api/request-password-reset", json={"email": "not-an-email"})

    assert response.status_code == 400
    assert response.json() == {"error": "Please enter a valid email address."}
    assert admin_db.auth.admin.updates == []


def test_request_reset_missing_email(api_client, admin_db):
    response = api_client.post("/api/request-password-reset", json={})
    assert response.status_code == 400


def test_request_reset_without_body(api_client, admin_db):
    response = api_client.post("/api/request-password-reset")

    assert response.status_code == 400
    assert response.json() == {"error": "Please enter a valid email address."}


def test_request_reset_non_string_email(api_client, admin_db):
    response = api_client.post("/api/request-password-reset", json={"email": 123})

    assert response.status_code == 400
    assert response.json() == {"error": "Please enter a valid email address."}
    assert admin_db.auth.admin.updates == []


def test_request_reset_unregistered_email(api_client, admin_db):
    admin_db.auth.add_user("someone@example.com", "secret")

    response = api_client.post("/api/request-password-reset", json={"email": "ghost@example.com"})

    assert response.status_code == 404
    assert response.json() == {"error": "This email is not registered."}
    assert admin_db.auth.admin.updates == []


def test_request_reset_success_logs_new_password(api_client, admin_db, caplog):
    admin_db.auth.add_user("user@example.com", "old-password")
    caplog.set_level(logging.INFO, logger="services.password_reset")

    response = api_client.post("/api/request-password-reset", json={"email": "User@Example.com"})

    assert response.status_code == 200
    assert response.json() == {"message": "Password reset successful. Check your email."}

    new_password = admin_db.auth.passwords["user@example.com"]
    assert new_password != "old-password"
    assert len(new_password) == 8 and new_password.isalnum()
    assert f"Your new password is: {new_password}" in caplog.text


def test_request_reset_without_service_role_key(api_client, monkeypatch):
    monkeypatch.setattr(database.settings, "supabase_service_role_key", "")
    monkeypatch.setattr(SupabaseStore, "_admin_client", None)

    response = api_client.post("/api/request-password-reset", json={"email": "user@example.com"})

    assert response.status_code == 500
    assert response.json() == {"error": "Server configuration error: Missing Service Role Key."}


def test_request_reset_backend_failure(api_client, admin_db, monkeypatch):
    admin_db.auth.add_user("user@example.com", "old-password")

    async def broken_update(user_id, attributes):
        raise RuntimeError("database is down")

    monkeypatch.setattr(admin_db.auth.admin, "update_user_by_id", broken_update)

    response = api_client.post("/api/request-password-reset", json={"email": "user@example.com"})

    assert response.status_code == 500
    assert response.json() == {"error": "database is down"}
