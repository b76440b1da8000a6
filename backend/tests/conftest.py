"""
Health Diary — Test Configuration (conftest.py)
================================================

What:  Shared pytest fixtures for the backend and client test suites.
Why:   Endpoint tests run against a throwaway SQLite database; client tests
       run against httpx.MockTransport or the real app over ASGITransport.
How:   Environment is overridden BEFORE any healthdiary import, because the
       engine and settings are created at import time.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── db: empty schema (create_all / drop_all around each test)
    ├── test_client: HTTPX AsyncClient wired to the FastAPI app
    ├── register_user / login: helpers returning ids and tokens
    ├── auth_headers: bearer headers for a freshly registered user
    ├── mock_db_session: AsyncMock session for pure service unit tests
    ├── fake_api / http_client: scripted API behind httpx.MockTransport
    ├── clock: controllable monotonic clock for cache-lifetime tests
    └── client_settings: ClientSettings pointed at http://test/api
"""

import os
import tempfile

# Override settings for testing BEFORE any healthdiary imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="healthdiary_test_"), "test.db"
)
os.environ["JWT_SECRET"] = "test-secret-not-for-production"
os.environ["BCRYPT_ROUNDS"] = "4"  # Fast hashing
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


# ══════════════════════════════════════════════════════════════════════════
# Database & API Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db():
    """
    Provides an empty schema for one test.

    What:    Runs Base.metadata.create_all before and drop_all after.
    Why:     ASGITransport does not run the app lifespan, so nothing else
             creates the tables.
    """
    from healthdiary.database import Base, engine
    from healthdiary.models import entry, user  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def test_client(db):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from healthdiary.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def register_user(test_client):
    """Registers an account and returns its user_id."""

    async def _register(username="alice", email=None, password="password123"):
        response = await test_client.post(
            "/api/users",
            json={
                "username": username,
                "email": email or f"{username}@example.com",
                "password": password,
            },
        )
        assert response.status_code == 201, response.text
        return response.json()["user_id"]

    return _register


@pytest.fixture
def login(test_client):
    """Logs in and returns the bearer token."""

    async def _login(username="alice", password="password123"):
        response = await test_client.post(
            "/api/auth/login", json={"username": username, "password": password}
        )
        assert response.status_code == 200, response.text
        return response.json()["token"]

    return _login


@pytest_asyncio.fixture
async def auth_headers(register_user, login):
    await register_user("alice")
    token = await login("alice")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_admin(db):
    """Promotes a user to admin directly in the database."""
    from sqlalchemy import update

    from healthdiary.database import async_session_factory
    from healthdiary.models.user import USER_LEVEL_ADMIN, User

    async def _make_admin(user_id):
        async with async_session_factory() as session:
            await session.execute(
                update(User).where(User.user_id == user_id).values(user_level=USER_LEVEL_ADMIN)
            )
            await session.commit()

    return _make_admin


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    What:    An AsyncMock that simulates AsyncSession behavior.
    Why:     Ownership and error-mapping logic can be tested without a database.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = entry
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# Client-Layer Fixtures
# ══════════════════════════════════════════════════════════════════════════

class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def client_settings():
    from healthdiary_client.config import ClientSettings

    return ClientSettings(
        api_url="http://test/api",
        origin="http://test",
        cache_lifetime=30,
        request_timeout=5,
        storage_path=None,
    )


class FakeApi:
    """
    Scriptable stand-in for the REST API behind httpx.MockTransport.

    Usage:
        fake_api.on("GET", "/api/entries", json=[...])
        fake_api.on("POST", "/api/entries", handler=my_async_handler)
        assert fake_api.count("GET", "/api/entries") == 1
    """

    def __init__(self):
        self.routes = {}
        self.requests = []

    def on(self, method, path, status=200, json=None, handler=None):
        self.routes[(method, path)] = handler or (status, json)

    def count(self, method, path):
        return sum(1 for r in self.requests if (r.method, r.url.path) == (method, path))

    async def __call__(self, request):
        import inspect

        import httpx

        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"message": "Route not found"})
        if callable(route):
            response = route(request)
            if inspect.isawaitable(response):
                response = await response
            return response
        status, body = route
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    @property
    def transport(self):
        import httpx

        return httpx.MockTransport(self)


@pytest.fixture
def fake_api():
    return FakeApi()


@pytest.fixture
def session_store():
    from healthdiary_client.core.storage import SessionStore

    return SessionStore()


@pytest_asyncio.fixture
async def http_client(client_settings, session_store, fake_api):
    from healthdiary_client.core.http_client import HttpClient

    client = HttpClient(client_settings, session_store, transport=fake_api.transport)
    yield client
    await client.aclose()
