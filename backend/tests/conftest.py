"""
Pytest fixtures for backend testing.
Provides database sessions, test clients, and mock token payloads.
"""

import os
from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
import pytest_asyncio
from fastapi import Request
from httpx import ASGITransport, AsyncClient
from jose import jwt  # type: ignore[import-untyped]
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

from uom_service.core.config import get_settings  # noqa: E402
from uom_service.core.errors import AuthTokenError  # noqa: E402
from uom_service.core.security.tokens import TokenPayload, verify_token  # noqa: E402
from uom_service.db.models import Base  # noqa: E402
from uom_service.db.session import get_db_session  # noqa: E402
from uom_service.main import create_application  # noqa: E402

# Test database URL; PostgreSQL when provided, in-memory SQLite otherwise
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL") or "sqlite+aiosqlite:///:memory:"


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture(autouse=True)
def reset_settings_cache() -> None:
    get_settings.cache_clear()


@pytest_asyncio.fixture
async def test_engine():
    """Create a test database engine with a fresh schema."""
    if TEST_DATABASE_URL.startswith("sqlite"):
        engine = create_async_engine(
            TEST_DATABASE_URL,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    else:
        engine = create_async_engine(TEST_DATABASE_URL, poolclass=NullPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a database session for service-level tests."""
    session_factory = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()


def make_token_payload(sub: str = "admin-123") -> TokenPayload:
    return TokenPayload(
        sub=sub,
        email="admin@example.com",
        name="Test Admin",
        type="admin",
        permissions=["uom:manage"],
        exp=datetime.now(UTC) + timedelta(hours=1),
        iat=datetime.now(UTC),
        raw_claims={},
    )


@pytest_asyncio.fixture
async def test_client(test_engine) -> AsyncGenerator[AsyncClient, None]:
    """Provide an async HTTP client for API testing."""
    app = create_application()

    async def override_verify_token(request: Request) -> TokenPayload:
        if not request.headers.get("Authorization"):
            raise AuthTokenError("Access token is required", error_code="MISSING_TOKEN")
        return make_token_payload()

    session_factory = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[verify_token] = override_verify_token
    app.dependency_overrides[get_db_session] = override_get_db_session

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def mock_auth_headers() -> dict[str, str]:
    """Mock Authorization header."""
    return {"Authorization": "Bearer test-token"}


@pytest.fixture
def sign_token():
    """Sign HS256 tokens with the test secret."""

    def _sign(claims: dict[str, Any], secret: str = "test-secret") -> str:
        return str(jwt.encode(claims, secret, algorithm="HS256"))

    return _sign
