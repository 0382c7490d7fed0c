"""Route Dependencies — per-request repository and service construction.

Invariants:
    - An in-memory repository on app.state wins over the database
    - Otherwise one AsyncSession per request, closed when the response is done

Design Decisions:
    - Built from app.state, not module globals: tests override or replace it
"""

from typing import AsyncGenerator

from fastapi import Depends, Request

from app.core.repository_protocols import UserRepository
from app.infrastructure.database import get_db_manager
from app.infrastructure.user_repository import SqlAlchemyUserRepository
from app.services.user_service import UserService


async def get_user_repository(
    request: Request,
) -> AsyncGenerator[UserRepository, None]:
    """Yield the configured UserRepository for this request."""
    in_memory = getattr(request.app.state, "user_repository", None)
    if in_memory is not None:
        yield in_memory
        return
    async with get_db_manager(request).session() as db:
        yield SqlAlchemyUserRepository(db)


def get_user_service(
    repository: UserRepository = Depends(get_user_repository),
) -> UserService:
    return UserService(repository)
