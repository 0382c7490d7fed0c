"""User Service — validate → authorize → execute for the user endpoints.

Invariants:
    - Validation runs before authentication and before any store access
    - On update, id and body are validated independently (two separate 400s)
    - Authorization is delegated to core/authorization.py; Deny is translated
      to UnauthorizedError or ForbiddenError by kind
    - Store errors are logged and re-raised unchanged (UserNotFoundError → 404
      via the global handler; anything else → generic handler)
    - No retries: every store call is one-shot

Design Decisions:
    - Repository injected through the constructor; the route layer decides
      whether it is SQL-backed or in-memory
    - Methods return plain dicts shaped as the response body
"""

import logging
from typing import Any

from app.core.authorization import (
    Decision, Deny, DenyKind,
    authorize_delete, authorize_read, authorize_update,
)
from app.core.domain_types import RequesterIdentity, UserId
from app.core.errors import (
    ErrorContext, ForbiddenError, RequestValidationFailedError, UnauthorizedError,
)
from app.core.repository_protocols import UserLike, UserRepository
from app.core.validation import format_validation_error, safe_parse
from app.schemas.user import UserIdParams, UserResponse, UserUpdate

logger = logging.getLogger(__name__)


def parse_user_id(raw_id: Any) -> UserId:
    """Validate the path id. Raises RequestValidationFailedError."""
    result = safe_parse(UserIdParams, {"id": raw_id})
    if not result.success:
        raise RequestValidationFailedError(
            format_validation_error(result.error), source="params",
        )
    return UserId(result.data.id)


def parse_user_update(raw_body: Any) -> UserUpdate:
    """Validate the update body. Raises RequestValidationFailedError."""
    result = safe_parse(UserUpdate, raw_body)
    if not result.success:
        raise RequestValidationFailedError(
            format_validation_error(result.error), source="body",
        )
    return result.data


def enforce(decision: Decision, requester: RequesterIdentity | None) -> None:
    """Raise the HTTP-facing error matching a Deny. No-op on Allow."""
    if not isinstance(decision, Deny):
        return
    context = ErrorContext(requester_id=requester.id if requester else None)
    if decision.kind is DenyKind.UNAUTHORIZED:
        raise UnauthorizedError(decision.reason, context)
    raise ForbiddenError(decision.reason, context)


def serialize_user(user: UserLike) -> dict:
    return UserResponse.model_validate(user).model_dump(mode="json")


class UserService:
    """Orchestrates the four user endpoints over an injected repository."""

    def __init__(self, repository: UserRepository):
        self._repository = repository

    async def list_users(self, requester: RequesterIdentity | None) -> dict:
        enforce(authorize_read(requester), requester)
        logger.info("Getting users ...")
        try:
            users = await self._repository.get_all()
        except Exception as e:
            logger.error(f"Error getting users: {e}")
            raise
        return {
            "message": "Successfully retrieved users",
            "users": [serialize_user(u) for u in users],
            "count": len(users),
        }

    async def get_user(
        self, requester: RequesterIdentity | None, raw_id: Any,
    ) -> dict:
        user_id = parse_user_id(raw_id)
        enforce(authorize_read(requester), requester)
        logger.info(
            f"Getting user with id: {user_id}", extra={"user_id": user_id},
        )
        try:
            user = await self._repository.get_by_id(user_id)
        except Exception as e:
            logger.error(f"Error getting user by id: {e}")
            raise
        return {
            "message": "Successfully retrieved user",
            "user": serialize_user(user),
        }

    async def update_user(
        self, requester: RequesterIdentity | None, raw_id: Any, raw_body: Any,
    ) -> dict:
        user_id = parse_user_id(raw_id)
        changes = parse_user_update(raw_body).changes()
        enforce(authorize_update(requester, user_id, changes), requester)
        logger.info(
            f"Updating user with id: {user_id}",
            extra={"user_id": user_id, "requester_id": requester.id},
        )
        try:
            user = await self._repository.update(user_id, changes)
        except Exception as e:
            logger.error(f"Error updating user: {e}")
            raise
        return {
            "message": "User updated successfully",
            "user": serialize_user(user),
        }

    async def delete_user(
        self, requester: RequesterIdentity | None, raw_id: Any,
    ) -> dict:
        user_id = parse_user_id(raw_id)
        enforce(authorize_delete(requester, user_id), requester)
        logger.info(
            f"Deleting user with id: {user_id}",
            extra={"user_id": user_id, "requester_id": requester.id},
        )
        try:
            await self._repository.delete(user_id)
        except Exception as e:
            logger.error(f"Error deleting user: {e}")
            raise
        return {"message": "User deleted successfully"}
