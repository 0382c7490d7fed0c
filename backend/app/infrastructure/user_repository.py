"""User Repository — SQLAlchemy implementation of the UserRepository protocol.

Invariants:
    - Bound to one AsyncSession (one per request)
    - get_by_id/update/delete raise UserNotFoundError for missing ids
    - update and delete commit their own single-row change
    - Only whitelisted columns are written by update()
    - A unique-email violation on update rolls back and raises
      EmailAlreadyInUseError; other integrity errors propagate
"""

import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError

from app.core.domain_types import UserId
from app.core.errors import EmailAlreadyInUseError, UserNotFoundError
from app.models.user import User

logger = logging.getLogger(__name__)

UPDATABLE_COLUMNS = frozenset({"name", "email", "role"})


class SqlAlchemyUserRepository:
    """Users table access through the async ORM session."""

    def __init__(self, db: AsyncSession):
        self._db = db

    async def get_all(self) -> list[User]:
        result = await self._db.execute(select(User).order_by(User.id))
        return list(result.scalars().all())

    async def get_by_id(self, user_id: UserId) -> User:
        result = await self._db.execute(
            select(User).where(User.id == user_id),
        )
        user = result.scalar_one_or_none()
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    async def update(self, user_id: UserId, fields: dict) -> User:
        user = await self.get_by_id(user_id)
        for column, value in fields.items():
            if column not in UPDATABLE_COLUMNS:
                raise ValueError(f"Column '{column}' is not updatable")
            setattr(user, column, value)
        try:
            await self._db.commit()
        except IntegrityError:
            await self._db.rollback()
            if "email" not in fields:
                raise
            raise EmailAlreadyInUseError(fields["email"])
        await self._db.refresh(user)
        return user

    async def delete(self, user_id: UserId) -> None:
        result = await self._db.execute(
            delete(User).where(User.id == user_id),
        )
        if result.rowcount == 0:
            await self._db.rollback()
            raise UserNotFoundError(user_id)
        await self._db.commit()
        logger.debug(f"Deleted user row {user_id}")
