"""
Shared test fixtures for the JWT Pizza Service test suite.

Every test gets a fresh in-memory database (aiosqlite + StaticPool) and an
httpx AsyncClient wired to the app with ``get_db`` overridden.
"""

import os
import sys
from collections.abc import AsyncGenerator
from uuid import uuid4

import pytest_asyncio

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CORS_ORIGINS"] = '["*"]'
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production"
os.environ["RECEIPT_SECRET_KEY"] = "test-receipt-key"

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from pizza_service.api.v1.deps import get_db
from pizza_service.crud import menu as menu_crud
from pizza_service.crud import users as user_crud
from pizza_service.db.base import Base
from pizza_service.main import app
from pizza_service.models.user import Role, UserRole


# ── Database ────────────────────────────────────────────────────────
@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Create all tables on a private in-memory database, drop it afterwards."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Return a raw database session for direct queries in tests."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def async_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app."""

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


# ── Users ───────────────────────────────────────────────────────────
def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def random_email(domain: str = "test.com") -> str:
    return f"{uuid4().hex[:10]}@{domain}"


async def register(client: AsyncClient, name: str = "pizza diner", password: str = "diner") -> dict:
    """Register a fresh diner through the API; returns the response body
    plus the password and ready-made auth headers."""
    email = random_email()
    resp = await client.post("/api/auth", json={"name": name, "email": email, "password": password})
    assert resp.status_code == 200, resp.text
    body = resp.json()
    body["password"] = password
    body["headers"] = bearer(body["token"])
    return body


async def login(client: AsyncClient, email: str, password: str) -> dict:
    resp = await client.put("/api/auth", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    body = resp.json()
    body["headers"] = bearer(body["token"])
    return body


@pytest_asyncio.fixture
async def make_diner(async_client: AsyncClient):
    """Factory: ``await make_diner(name=..., password=...)`` registers another diner."""

    async def _make(name: str = "pizza diner", password: str = "diner") -> dict:
        return await register(async_client, name=name, password=password)

    return _make


@pytest_asyncio.fixture
async def login_as(async_client: AsyncClient):
    """Factory: ``await login_as(email, password)`` opens a new session."""

    async def _login(email: str, password: str) -> dict:
        return await login(async_client, email, password)

    return _login


@pytest_asyncio.fixture
async def admin(async_client: AsyncClient, db_session: AsyncSession) -> dict:
    """An admin account, logged in."""
    password = "toomanysecrets"
    user = await user_crud.create(
        db_session,
        "pizza admin",
        random_email("admin.com"),
        password,
        roles=[UserRole(role=Role.ADMIN.value)],
    )
    return await login(async_client, user.email, password)


@pytest_asyncio.fixture
async def diner(async_client: AsyncClient) -> dict:
    return await register(async_client)


@pytest_asyncio.fixture
async def menu(db_session: AsyncSession) -> None:
    await menu_crud.seed_default_menu(db_session)


@pytest_asyncio.fixture
async def franchise(async_client: AsyncClient, admin: dict) -> dict:
    """A franchise owned by a freshly registered franchisee, with one store.

    Returns the franchise body, the store body and the franchisee's
    session (logged in after the franchise exists so the token carries
    the franchisee role).
    """
    owner = await register(async_client, name="franchise owner", password="owner")
    resp = await async_client.post(
        "/api/franchise",
        json={"name": f"pizzaPocket-{uuid4().hex[:6]}", "admins": [{"email": owner["user"]["email"]}]},
        headers=admin["headers"],
    )
    assert resp.status_code == 200, resp.text
    created = resp.json()

    owner_session = await login(async_client, owner["user"]["email"], "owner")
    store = await async_client.post(
        f"/api/franchise/{created['id']}/store",
        json={"name": "SLC"},
        headers=owner_session["headers"],
    )
    assert store.status_code == 200, store.text
    return {"franchise": created, "store": store.json(), "owner": owner_session}
