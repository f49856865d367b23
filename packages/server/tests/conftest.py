"""
Shared fixtures: a throwaway SQLite database, an HTTP client bound to the app,
and helpers for creating members with a bearer token.
"""

from __future__ import annotations

import os
import tempfile
import uuid
from dataclasses import dataclass

_DB_DIR = tempfile.mkdtemp(prefix="opsdesk-tests-")
os.environ["OPSDESK_DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR}/test.db"
os.environ["OPSDESK_CREATE_TABLES_ON_STARTUP"] = "false"
os.environ["OPSDESK_LOG_FORMAT"] = "text"
os.environ["OPSDESK_SECRET_KEY"] = "test-secret-key-with-enough-length-for-hs256"

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

import app.models  # noqa: E402,F401
from app.core.auth import create_jwt  # noqa: E402
from app.core.database import async_session_factory, engine  # noqa: E402
from app.main import app  # noqa: E402
from app.models.user import User  # noqa: E402
from app.models.user_role import UserRole  # noqa: E402


@dataclass
class Member:
    id: uuid.UUID
    email: str
    headers: dict


@pytest.fixture(autouse=True)
async def _database():
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)
    yield
    await engine.dispose()


@pytest.fixture
async def client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


async def insert(*rows):
    """Persist rows directly, bypassing the API."""
    async with async_session_factory() as session:
        session.add_all(rows)
        await session.commit()
        for row in rows:
            await session.refresh(row)
    return rows[0] if len(rows) == 1 else rows


def bearer(user_id: uuid.UUID) -> dict:
    return {"Authorization": f"Bearer {create_jwt(user_id)}"}


@pytest.fixture
def make_member():
    """Factory: create a user (with an optional role row) and return its bearer headers."""

    async def _make(role: str | None = "non_lead", *, status: str = "active", email: str | None = None) -> Member:
        email = email or f"{uuid.uuid4().hex[:10]}@example.com"
        user = await insert(User(email=email, full_name=email.split("@")[0], status=status))
        if role is not None:
            await insert(UserRole(user_id=user.id, role=role))
        return Member(id=user.id, email=email, headers=bearer(user.id))

    return _make


@pytest.fixture
async def lead(make_member) -> Member:
    return await make_member("lead")


@pytest.fixture
async def alice(make_member) -> Member:
    return await make_member("non_lead")


@pytest.fixture
async def bob(make_member) -> Member:
    return await make_member("non_lead")
