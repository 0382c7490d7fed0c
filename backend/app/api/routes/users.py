"""Users Routes — list, fetch, update, and delete user records.

Invariants:
    - Every route depends on authenticate; none is public
    - Path id and JSON body reach the service raw; validation happens there,
      in a fixed order (id, then body, then auth)
    - Routes hold no business logic

Design Decisions:
    - id typed as str in the path: FastAPI's own int coercion would reject bad
      ids before authentication runs and merge id/body errors into one 400
"""

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Request

from app.api.dependencies import get_user_service
from app.core.domain_types import RequesterIdentity
from app.infrastructure.auth import authenticate
from app.services.user_service import UserService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/users", tags=["users"])


async def _read_json_body(request: Request) -> Any:
    """Body as parsed JSON; None when empty or unparseable (fails validation)."""
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning(f"Unparseable JSON body on {request.url.path}")
        return None


@router.get("")
async def fetch_all_users(
    requester: RequesterIdentity | None = Depends(authenticate),
    service: UserService = Depends(get_user_service),
):
    """List all users with a count."""
    return await service.list_users(requester)


@router.get("/{user_id}")
async def get_user_by_id(
    user_id: str,
    requester: RequesterIdentity | None = Depends(authenticate),
    service: UserService = Depends(get_user_service),
):
    """Get one user."""
    return await service.get_user(requester, user_id)


@router.put("/{user_id}")
async def update_user(
    user_id: str,
    request: Request,
    requester: RequesterIdentity | None = Depends(authenticate),
    service: UserService = Depends(get_user_service),
):
    """Update own record, or any record as admin. Role changes are admin-only."""
    body = await _read_json_body(request)
    return await service.update_user(requester, user_id, body)


@router.delete("/{user_id}")
async def delete_user(
    user_id: str,
    requester: RequesterIdentity | None = Depends(authenticate),
    service: UserService = Depends(get_user_service),
):
    """Delete own account, or any account as admin."""
    return await service.delete_user(requester, user_id)
