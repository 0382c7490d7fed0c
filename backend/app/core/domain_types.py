"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId wraps int; never pass a raw path string into domain logic
    - UserRole is closed: every role comparison goes through the enum
    - RequesterIdentity is immutable once attached to a request

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enum for roles: serializes to JSON and matches the DB column value
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", int)


# ─── Enums ───────────────────────────────────────────────────────

class UserRole(str, Enum):
    """User roles — maps to DB `role` column."""
    ADMIN = "admin"
    USER = "user"


class UserAction(str, Enum):
    """Mutating actions gated by the ownership-or-admin rule."""
    UPDATE = "update"
    DELETE = "delete"


# ─── Requester ───────────────────────────────────────────────────

@dataclass(frozen=True)
class RequesterIdentity:
    """Authenticated caller, derived per request from the access token."""
    id: UserId
    role: UserRole
    email: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN
