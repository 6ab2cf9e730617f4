"""Fixtures for server tests: an in-memory database, the app client and users."""

from __future__ import annotations

import uuid
from typing import AsyncGenerator, Callable, Dict, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlmodel.pool import StaticPool

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh in-memory database for every test."""
    from medops.core.database import create_all

    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_maker(test_engine):
    from medops.core.database import create_sessionmaker

    return create_sessionmaker(test_engine)


@pytest_asyncio.fixture(name="session")
async def session_fixture(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Create a new session for each test."""
    async with session_maker() as session:
        yield session


@pytest.fixture
def repos(session):
    from medops.core.database.repositories import build_sql_repos_from_session

    return build_sql_repos_from_session(session=session)


@pytest_asyncio.fixture(name="client")
async def client_fixture(session: AsyncSession, session_maker, monkeypatch) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client with the database session overridden."""
    from medops.core.database import get_session
    from medops.core.database import session as db_session
    from medops.server.main import app

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override
    # Request logs are written through the global session factory
    monkeypatch.setattr(db_session, "async_session_maker", session_maker)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session: AsyncSession) -> Callable:
    """Factory creating an active user with a role."""
    from medops.core.database.entities.users import User
    from medops.server.core.security import hash_password

    async def _make(
        role: str = "BD",
        *,
        email: Optional[str] = None,
        name: Optional[str] = None,
        team_id: Optional[str] = None,
        password: str = "s3cret-pass",
        is_active: bool = True,
    ) -> User:
        role = getattr(role, "value", role)
        user = User(
            email=email or f"{role.lower()}-{uuid.uuid4().hex[:8]}@medops.test",
            name=name or role.replace("_", " ").title(),
            password_hash=hash_password(password),
            role=role,
            team_id=team_id,
            is_active=is_active,
        )
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user

    return _make


@pytest.fixture
def auth_headers() -> Callable:
    """Build bearer headers for a user."""
    from medops.server.core.security import create_access_token

    def _headers(user) -> Dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user.id, user.role, user.team_id)}"}

    return _headers
