from datetime import datetime, timedelta, timezone

import bcrypt
import jwt
import pytest
from sqlalchemy import select

from app.auth import generate_token, verify_password, verify_token
from app.config import settings
from app.errors import InternalError
from app.models import ActivityLog


async def login_entries(session):
    rows = await session.execute(select(ActivityLog).where(ActivityLog.action_type == "login"))
    return list(rows.scalars().all())


def test_login_requires_a_body(client):
    resp = client.post("/auth/login", content=b"")
    assert resp.status_code == 400
    assert resp.json() == {"error": "Request body is required"}


def test_login_rejects_malformed_json(client):
    resp = client.post("/auth/login", content=b"{not json", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid JSON in request body"}


@pytest.mark.parametrize("body", [{"username": "admin"}, {"password": "admin"}, {"username": "", "password": ""}])
def test_login_requires_both_fields(client, body):
    resp = client.post("/auth/login", json=body)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Username and password are required"}


def test_unknown_username_is_rejected(client, run_db):
    resp = client.post("/auth/login", json={"username": "root", "password": "admin"})
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid credentials"}
    assert run_db(login_entries) == []


def test_wrong_password_logs_one_failed_attempt(client, run_db):
    resp = client.post(
        "/auth/login",
        json={"username": "admin", "password": "nope"},
        headers={"X-Forwarded-For": "10.0.0.7, 172.16.0.1", "User-Agent": "pytest"},
    )
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid credentials"}

    entries = run_db(login_entries)
    assert len(entries) == 1
    entry = entries[0]
    assert entry.username == "admin"
    assert entry.description == "Failed login attempt for user admin"
    assert entry.ip_address == "10.0.0.7"
    assert entry.user_agent == "pytest"
    assert entry.metadata_["success"] is False
    assert entry.metadata_["reason"] == "invalid_password"
    assert "login_time" in entry.metadata_


def test_successful_login_issues_a_24_hour_admin_token(client, run_db):
    resp = client.post("/auth/login", json={"username": "admin", "password": "admin"})
    assert resp.status_code == 200

    body = resp.json()
    assert body["message"] == "Login successful"
    assert body["user"] == {"username": "admin", "isAdmin": True}

    claims = jwt.decode(body["token"], settings.JWT_SECRET, algorithms=["HS256"])
    assert claims["isAdmin"] is True
    assert claims["username"] == "admin"
    assert claims["exp"] - claims["iat"] == 24 * 3600

    entries = run_db(login_entries)
    assert len(entries) == 1
    assert entries[0].metadata_["success"] is True
    assert entries[0].description == "User admin logged in successfully"


def test_login_with_bcrypt_hash(client, monkeypatch):
    password_hash = bcrypt.hashpw(b"s3cret", bcrypt.gensalt(rounds=4)).decode()
    monkeypatch.setattr(settings, "ADMIN_PASSWORD_HASH", password_hash)

    assert client.post("/auth/login", json={"username": "admin", "password": "admin"}).status_code == 401
    assert client.post("/auth/login", json={"username": "admin", "password": "s3cret"}).status_code == 200


def test_placeholder_hash_falls_back_to_development_password():
    assert verify_password("admin", "your_hashed_password_here")
    assert not verify_password("admin123", "")


def test_malformed_hash_is_a_system_error(client, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_PASSWORD_HASH", "not-a-bcrypt-hash")
    with pytest.raises(InternalError):
        verify_password("admin", settings.ADMIN_PASSWORD_HASH)

    resp = client.post("/auth/login", json={"username": "admin", "password": "admin"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Authentication system error"}


def test_verify_token_rejects_expired_and_non_admin_tokens():
    expired = generate_token("admin", now=datetime.now(timezone.utc) - timedelta(hours=25))
    assert verify_token(expired) is None

    not_admin = jwt.encode({"username": "admin", "isAdmin": False}, settings.JWT_SECRET, algorithm="HS256")
    assert verify_token(not_admin) is None

    forged = jwt.encode({"username": "admin", "isAdmin": True}, "other-secret", algorithm="HS256")
    assert verify_token(forged) is None

    assert verify_token(generate_token("admin"))["username"] == "admin"


def test_logout_requires_a_token(client):
    resp = client.post("/auth/logout")
    assert resp.status_code == 401
    assert resp.json() == {"error": "Unauthorized. Admin access required."}


def test_logout_is_logged(client, auth_headers, run_db):
    resp = client.post("/auth/logout", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Logout successful"}

    async def logout_entries(session):
        rows = await session.execute(select(ActivityLog).where(ActivityLog.action_type == "logout"))
        return list(rows.scalars().all())

    assert len(run_db(logout_entries)) == 1


def test_long_wrong_password_is_rejected_and_logged(client, run_db, monkeypatch):
    password_hash = bcrypt.hashpw(b"s3cret", bcrypt.gensalt(rounds=4)).decode()
    monkeypatch.setattr(settings, "ADMIN_PASSWORD_HASH", password_hash)

    resp = client.post("/auth/login", json={"username": "admin", "password": "x" * 80})
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid credentials"}

    entries = run_db(login_entries)
    assert len(entries) == 1
    assert entries[0].metadata_["success"] is False


def test_only_the_first_72_bytes_of_a_password_count():
    password_hash = bcrypt.hashpw(b"a" * 72, bcrypt.gensalt(rounds=4)).decode()
    assert verify_password("a" * 72 + "ignored", password_hash)
    assert not verify_password("b" * 80, password_hash)
