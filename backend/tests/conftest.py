"""Root conftest — shared test configuration, token helpers, SQLite fixtures."""

import os

# Must be set before app.config.get_settings() is first called
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production-use-only")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.core.domain_types import RequesterIdentity, UserId, UserRole  # noqa: E402
from app.db.base import Base  # noqa: E402
import app.models  # noqa: E402,F401  (populates Base.metadata)
from app.infrastructure.auth import create_access_token  # noqa: E402


@pytest.fixture
def auth_headers():
    """Factory: Authorization header for a requester with the given id/role."""

    def _make(user_id: int, role: UserRole = UserRole.USER) -> dict[str, str]:
        token = create_access_token(
            RequesterIdentity(
                id=UserId(user_id), role=role, email=f"user{user_id}@example.com",
            ),
        )
        return {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture
async def test_engine():
    """Fresh in-memory SQLite with all tables. StaticPool shares one connection."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session
