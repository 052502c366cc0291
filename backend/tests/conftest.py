"""Pytest configuration and shared fixtures for API tests."""

import os
import tempfile

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import delete

# Set test DB and disable external services before app imports so config/engine use them
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///" + os.path.join(tempfile.gettempdir(), "mindful_checkin_test.db"),
)
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["GOOGLE_GEMINI_API_KEY"] = ""
os.environ["SENTIMENT_API_URL"] = ""
os.environ["ACTIVITY_RECOMMENDATION_API_URL"] = ""
os.environ["RATE_LIMIT_ENABLED"] = "false"

from app.core.auth import create_access_token, hash_password
from app.db.base import Base
from app.db.session import async_session_maker, engine, init_db
from app.main import app
from app.models.user import User

pytest_plugins = ["pytest_asyncio"]

ONBOARDING_PAYLOAD = {
    "name": "Alex",
    "age": 29,
    "gender": "unspecified",
    "currentMentalHealth": "Fair",
    "joinReason": "Manage stress at work",
    "goals": ["reduce stress", "sleep better"],
    "sleepPattern": "Poor",
    "stressLevel": 7,
    "socialConnection": "Moderate",
    "mentalHealthConcerns": ["anxiety"],
    "exerciseFrequency": "1-2-times-week",
    "dietQuality": "good",
    "substanceUse": "none",
    "copingMechanisms": "walking",
}


@pytest_asyncio.fixture
async def ensure_db():
    """Create tables and the shared HTTP client (the app lifespan does not run under ASGITransport)."""
    await init_db()
    from app.services.http_client import init_http_client

    init_http_client(timeout=5.0)
    yield
    from app.services.http_client import close_http_client

    await close_http_client()


async def _truncate_all():
    """Delete all rows in reverse dependency order so tests start clean."""
    async with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            await conn.execute(delete(table))


@pytest_asyncio.fixture
async def client(ensure_db):
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest_asyncio.fixture
async def clean_db(ensure_db):
    await _truncate_all()
    yield


@pytest_asyncio.fixture
async def test_user(clean_db, client):
    """Create a user via DB (committed) and return (user_id, email, access_token)."""
    async with async_session_maker() as session:
        user = User(
            email="test@test.com",
            password_hash=hash_password("password123"),
        )
        session.add(user)
        await session.commit()
        await session.refresh(user)
        token = create_access_token(user.id, user.email)
        return user.id, user.email, token


@pytest.fixture
def auth_headers(test_user):
    _, __, token = test_user
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def onboarding_payload():
    return dict(ONBOARDING_PAYLOAD)


@pytest_asyncio.fixture
async def onboarded(client: AsyncClient, auth_headers: dict, onboarding_payload: dict):
    """Submit onboarding for test_user; returns the response body."""
    resp = await client.post("/api/v1/profile/onboarding", json=onboarding_payload, headers=auth_headers)
    assert resp.status_code == 201
    return resp.json()
