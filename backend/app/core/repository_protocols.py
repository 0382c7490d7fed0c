"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Missing rows raise UserNotFoundError; implementations never return None
      from get_by_id/update/delete

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO; the policy functions that run
      around these calls stay sync and pure
"""

from datetime import datetime
from typing import Protocol

from app.core.domain_types import UserId


class UserLike(Protocol):
    """Structural contract for user records returned by any repository.

    Avoids coupling the service layer to the ORM model.
    """
    id: int
    name: str
    email: str
    role: str
    created_at: datetime
    updated_at: datetime


class UserRepository(Protocol):
    """Contract for user persistence — implemented by shell."""
    async def get_all(self) -> list[UserLike]: ...
    async def get_by_id(self, user_id: UserId) -> UserLike: ...
    async def update(self, user_id: UserId, fields: dict) -> UserLike: ...
    async def delete(self, user_id: UserId) -> None: ...
