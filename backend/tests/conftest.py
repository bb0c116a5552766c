from __future__ import annotations

import os

# Settings are read at import time; pin them before the package loads.
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")
os.environ.setdefault("DATABASE_URL_ASYNC", "sqlite+aiosqlite:///:memory:")

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from tenant_notes.db.session import get_db

# Ensure Base + models are registered before create_all
import tenant_notes.models  # noqa: F401
from tenant_notes.db.init_db import DEMO_PASSWORD, create_schema, seed_demo_data


# ---------------------------------------------------------
# Engine + schema lifecycle
# ---------------------------------------------------------
@pytest_asyncio.fixture()
async def engine(tmp_path):
    """
    One throwaway SQLite file per test: every test starts from the
    freshly seeded demo tenants and nothing leaks between tests.
    """
    db_file = tmp_path / "notes_test.db"
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{db_file}",
        poolclass=NullPool,
    )

    await create_schema(engine)

    yield engine

    await engine.dispose()


@pytest.fixture()
def sessionmaker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(autouse=True)
async def _seed(sessionmaker):
    async with sessionmaker() as session:
        await seed_demo_data(session)
    yield


# ---------------------------------------------------------
# DB session for assertions / setup
# ---------------------------------------------------------
@pytest_asyncio.fixture()
async def db(sessionmaker):
    """
    Session for test setup & assertions ONLY.
    """
    async with sessionmaker() as session:
        yield session
        await session.rollback()


# ---------------------------------------------------------
# FastAPI app + dependency override
# ---------------------------------------------------------
@pytest.fixture()
def app(sessionmaker):
    from tenant_notes.main import app as fastapi_app

    async def _override_get_db():
        async with sessionmaker() as session:
            yield session

    fastapi_app.dependency_overrides[get_db] = _override_get_db
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


# ---------------------------------------------------------
# HTTP client
# ---------------------------------------------------------
@pytest_asyncio.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
    ) as ac:
        yield ac


# ---------------------------------------------------------
# Auth helpers
# ---------------------------------------------------------
def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def login_as(client):
    """
    await login_as("admin@acme.test") -> Authorization headers.
    """

    async def _login(email: str, password: str = DEMO_PASSWORD) -> dict[str, str]:
        r = await client.post("/auth/login", json={"email": email, "password": password})
        assert r.status_code == 200, r.text
        return bearer(r.json()["token"])

    return _login


@pytest_asyncio.fixture()
async def acme_admin(login_as) -> dict[str, str]:
    return await login_as("admin@acme.test")


@pytest_asyncio.fixture()
async def acme_member(login_as) -> dict[str, str]:
    return await login_as("user@acme.test")


@pytest_asyncio.fixture()
async def globex_admin(login_as) -> dict[str, str]:
    return await login_as("admin@globex.test")


@pytest_asyncio.fixture()
async def globex_member(login_as) -> dict[str, str]:
    return await login_as("user@globex.test")
