"""Service test fixtures — seeded stores + FastAPI test clients.

Invariants:
    - Every test gets a fresh in-memory repository (and a fresh SQLite DB for db_client)
    - Seed ids are fixed: 1 = Bob (user), 2 = Carol (user), 3 = Alice (admin)
    - Apps are built with create_app(); lifespan never runs under ASGITransport,
      so the store is handed in explicitly
"""

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.domain_types import UserRole
from app.infrastructure.database import DatabaseSessionManager
from app.infrastructure.in_memory_user_repository import InMemoryUserRepository
from app.main import create_app
from app.models.user import User


@pytest.fixture
def user_repo():
    repo = InMemoryUserRepository()
    repo.add("Bob User", "bob@example.com")
    repo.add("Carol User", "carol@example.com")
    repo.add("Alice Admin", "alice@example.com", role=UserRole.ADMIN)
    return repo


@pytest.fixture
async def client(user_repo):
    """FastAPI test client over the in-memory repository."""
    app = create_app(user_repository=user_repo)
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c


@pytest.fixture
async def seed_users(test_db):
    """Insert Bob, Carol, Alice so their ids are 1, 2, 3."""
    users = [
        User(name="Bob User", email="bob@example.com", password="x"),
        User(name="Carol User", email="carol@example.com", password="x"),
        User(
            name="Alice Admin", email="alice@example.com", password="x",
            role=UserRole.ADMIN.value,
        ),
    ]
    for user in users:
        test_db.add(user)
        await test_db.flush()
    await test_db.commit()
    return users


@pytest.fixture
async def db_client(test_engine, seed_users):
    """FastAPI test client over the SQLAlchemy repository on SQLite."""
    app = create_app(db_manager=DatabaseSessionManager(test_engine))
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
