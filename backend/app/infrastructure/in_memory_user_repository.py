"""In-Memory User Repository — dict-backed UserRepository for tests and local runs.

Invariants:
    - Same contract as SqlAlchemyUserRepository: missing ids raise UserNotFoundError
    - ids are assigned sequentially starting at 1 and never reused
    - emails are unique across records, as the users.email column enforces
    - calls records every store operation, so tests can assert the store
      was (or was not) touched

Design Decisions:
    - No lock: a single asyncio loop owns the dict and no method awaits mid-mutation
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from app.core.domain_types import UserId, UserRole
from app.core.errors import EmailAlreadyInUseError, UserNotFoundError


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class UserRecord:
    """Plain user row mirroring the columns of models.user.User."""
    id: int
    name: str
    email: str
    role: str = UserRole.USER.value
    password: str = ""
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)


class InMemoryUserRepository:
    """UserRepository over a dict keyed by user id."""

    def __init__(self):
        self._users: dict[int, UserRecord] = {}
        self._next_id = 1
        self.calls: list[tuple[str, int | None]] = []

    def add(
        self,
        name: str,
        email: str,
        role: UserRole = UserRole.USER,
        password: str = "",
    ) -> UserRecord:
        """Seed a user. Not part of the UserRepository protocol."""
        record = UserRecord(
            id=self._next_id, name=name, email=email.lower(),
            role=role.value, password=password,
        )
        self._users[record.id] = record
        self._next_id += 1
        return replace(record)

    async def get_all(self) -> list[UserRecord]:
        self.calls.append(("get_all", None))
        return [replace(u) for u in sorted(self._users.values(), key=lambda u: u.id)]

    async def get_by_id(self, user_id: UserId) -> UserRecord:
        self.calls.append(("get_by_id", user_id))
        return replace(self._require(user_id))

    async def update(self, user_id: UserId, fields: dict) -> UserRecord:
        self.calls.append(("update", user_id))
        current = self._require(user_id)
        email = fields.get("email")
        if email is not None and any(
            u.email == email for u in self._users.values() if u.id != user_id
        ):
            raise EmailAlreadyInUseError(email)
        updated = replace(current, **fields, updated_at=_utcnow())
        self._users[user_id] = updated
        return replace(updated)

    async def delete(self, user_id: UserId) -> None:
        self.calls.append(("delete", user_id))
        self._require(user_id)
        del self._users[user_id]

    def _require(self, user_id: UserId) -> UserRecord:
        user = self._users.get(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user
