"""Tests for auth endpoints: register, login, me, refresh; JWT encode/decode."""

from datetime import datetime, timezone, timedelta
from unittest.mock import patch

import pytest
from httpx import AsyncClient
from jose import JWTError, jwt

from app.config import settings
from app.core.auth import create_access_token, decode_token


@pytest.mark.asyncio
async def test_register(client: AsyncClient, clean_db):
    resp = await client.post(
        "/api/v1/auth/register",
        json={"email": "NewUser@test.com", "password": "securepass123"},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["user"]["email"] == "newuser@test.com"
    assert "access_token" in data
    assert "refresh_token" in data
    assert data["token_type"] == "bearer"


@pytest.mark.asyncio
async def test_register_duplicate_email(client: AsyncClient, clean_db):
    """Second register with same email returns 400. Create first user via DB so it persists."""
    from app.core.auth import hash_password
    from app.db.session import async_session_maker
    from app.models.user import User

    async with async_session_maker() as session:
        session.add(
            User(email="dup@test.com", password_hash=hash_password("x")),
        )
        await session.commit()
    resp = await client.post(
        "/api/v1/auth/register",
        json={"email": "dup@test.com", "password": "other"},
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "Email already registered"


@pytest.mark.asyncio
async def test_login(client: AsyncClient, auth_headers: dict):
    resp = await client.post(
        "/api/v1/auth/login",
        json={"email": "test@test.com", "password": "password123"},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["user"]["email"] == "test@test.com"
    assert "access_token" in data


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, auth_headers: dict):
    resp = await client.post(
        "/api/v1/auth/login",
        json={"email": "test@test.com", "password": "wrong"},
    )
    assert resp.status_code == 401
    assert resp.json() == {"message": "Invalid email or password"}


@pytest.mark.asyncio
async def test_me(client: AsyncClient, auth_headers: dict):
    resp = await client.get("/api/v1/auth/me", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["email"] == "test@test.com"


@pytest.mark.asyncio
async def test_me_unauthorized(client: AsyncClient):
    resp = await client.get("/api/v1/auth/me")
    assert resp.status_code == 401
    assert resp.json()["message"] == "Not authenticated"


@pytest.mark.asyncio
async def test_refresh_rotates_token(client: AsyncClient, clean_db):
    reg = await client.post(
        "/api/v1/auth/register",
        json={"email": "rot@test.com", "password": "securepass123"},
    )
    old_refresh = reg.json()["refresh_token"]

    resp = await client.post("/api/v1/auth/refresh", json={"refreshToken": old_refresh})
    assert resp.status_code == 200
    new_refresh = resp.json()["refresh_token"]
    assert new_refresh != old_refresh

    reuse = await client.post("/api/v1/auth/refresh", json={"refreshToken": old_refresh})
    assert reuse.status_code == 401


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_create_and_decode_token_roundtrip():
    token = create_access_token(user_id=42, email="u@example.com")
    assert isinstance(token, str)
    payload = decode_token(token)
    assert payload["sub"] == "42"
    assert payload["email"] == "u@example.com"
    assert "exp" in payload


def test_decode_invalid_signature_raises():
    token = create_access_token(user_id=1, email="a@b.com")
    header, body, signature = token.split(".")
    # Tamper with the first signature character; trailing characters may only carry padding bits
    bad_token = ".".join([header, body, ("A" if signature[0] != "A" else "B") + signature[1:]])
    with pytest.raises(JWTError):
        decode_token(bad_token)


def test_decode_expired_token_raises():
    payload = {
        "sub": "1",
        "email": "u@test.com",
        "exp": datetime.now(timezone.utc) - timedelta(minutes=1),
    }
    token = jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)
    with pytest.raises(JWTError):
        decode_token(token)


def test_decode_wrong_key_raises():
    token = create_access_token(user_id=1, email="a@b.com")
    with patch.object(settings, "secret_key", "other-secret"):
        with pytest.raises(JWTError):
            decode_token(token)
