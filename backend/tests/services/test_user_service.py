"""User Service — orchestration order and error translation without HTTP.

Tests cover:
    - id validated before body, body before authentication
    - Deny(UNAUTHORIZED) → UnauthorizedError, Deny(FORBIDDEN) → ForbiddenError
    - store errors re-raised unchanged
    - store never touched when a gate fails
"""

import pytest
from unittest.mock import AsyncMock

from app.core.authorization import Deny, DenyKind, ALLOW
from app.core.domain_types import RequesterIdentity, UserId, UserRole
from app.core.errors import (
    ForbiddenError, RequestValidationFailedError, UnauthorizedError, UserNotFoundError,
)
from app.services.user_service import UserService, enforce, parse_user_id

BOB, CAROL, ALICE = 1, 2, 3

bob = RequesterIdentity(UserId(BOB), UserRole.USER)
alice = RequesterIdentity(UserId(ALICE), UserRole.ADMIN)


@pytest.fixture
def service(user_repo):
    return UserService(user_repo)


# ─── helpers ─────────────────────────────────────────────────────

def test_parse_user_id_coerces_digits():
    assert parse_user_id("12") == 12


def test_parse_user_id_reports_params_source():
    with pytest.raises(RequestValidationFailedError) as exc_info:
        parse_user_id("abc")
    assert exc_info.value.source == "params"


def test_enforce_allow_is_noop():
    enforce(ALLOW, bob)


def test_enforce_maps_deny_kinds():
    with pytest.raises(UnauthorizedError):
        enforce(Deny(DenyKind.UNAUTHORIZED, "Authentication required"), None)
    with pytest.raises(ForbiddenError) as exc_info:
        enforce(Deny(DenyKind.FORBIDDEN, "nope"), bob)
    assert exc_info.value.context.requester_id == BOB


# ─── ordering ────────────────────────────────────────────────────

async def test_update_validates_id_before_body(service, user_repo):
    with pytest.raises(RequestValidationFailedError) as exc_info:
        await service.update_user(bob, "abc", {"bogus": True})
    assert exc_info.value.source == "params"
    assert user_repo.calls == []


async def test_update_validates_body_before_authentication(service, user_repo):
    with pytest.raises(RequestValidationFailedError) as exc_info:
        await service.update_user(None, str(BOB), {"bogus": True})
    assert exc_info.value.source == "body"
    assert user_repo.calls == []


async def test_update_without_identity_is_unauthorized(service, user_repo):
    with pytest.raises(UnauthorizedError):
        await service.update_user(None, str(CAROL), {"role": "admin"})
    assert user_repo.calls == []


async def test_update_only_sends_provided_fields():
    repo = AsyncMock()
    repo.update.side_effect = UserNotFoundError(BOB)
    with pytest.raises(UserNotFoundError):
        await UserService(repo).update_user(bob, str(BOB), {"name": "Robert"})
    repo.update.assert_awaited_once_with(BOB, {"name": "Robert"})


async def test_delete_forbidden_for_other_user(service, user_repo):
    with pytest.raises(ForbiddenError):
        await service.delete_user(bob, str(CAROL))
    assert user_repo.calls == []


async def test_get_missing_user_raises_not_found(service):
    with pytest.raises(UserNotFoundError) as exc_info:
        await service.get_user(bob, "404")
    assert exc_info.value.user_id == 404


async def test_store_failures_propagate_unchanged():
    repo = AsyncMock()
    boom = RuntimeError("connection reset")
    repo.get_all.side_effect = boom
    with pytest.raises(RuntimeError) as exc_info:
        await UserService(repo).list_users(bob)
    assert exc_info.value is boom


# ─── results ─────────────────────────────────────────────────────

async def test_list_returns_serialized_users(service):
    result = await service.list_users(bob)
    assert result["count"] == 3
    assert {u["email"] for u in result["users"]} == {
        "bob@example.com", "carol@example.com", "alice@example.com",
    }


async def test_admin_update_role(service):
    result = await service.update_user(alice, str(BOB), {"role": "admin"})
    assert result["user"]["role"] == "admin"


async def test_delete_returns_message_only(service):
    result = await service.delete_user(alice, str(CAROL))
    assert result == {"message": "User deleted successfully"}
