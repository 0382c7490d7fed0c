"""Authorization Policy — pure decision predicates for user-mutation endpoints.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Every predicate returns Allow or Deny(kind, reason), never raises
    - evaluate() chains checks left-to-right; the first Deny wins and later checks do not run
    - Missing identity is DenyKind.UNAUTHORIZED; insufficient privilege is
      DenyKind.FORBIDDEN; the two are never conflated
    - Only admins may change a role; non-admins may only act on their own record

Design Decisions:
    - Tagged result over exceptions: chains compose with `or`-style short-circuit,
      the service layer translates Deny into the matching HTTP error
    - Checks are zero-arg callables inside evaluate(): later checks may assume
      earlier ones passed (e.g. requester is not None after check_authenticated)
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from functools import partial

from app.core.domain_types import RequesterIdentity, UserAction, UserId, UserRole


class DenyKind(str, Enum):
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class Allow:
    """Check passed."""

    @property
    def allowed(self) -> bool:
        return True


@dataclass(frozen=True)
class Deny:
    """Check failed. kind selects 401 vs 403, reason is user-facing."""
    kind: DenyKind
    reason: str

    @property
    def allowed(self) -> bool:
        return False


Decision = Allow | Deny
Check = Callable[[], Decision]

ALLOW = Allow()

AUTHENTICATION_REQUIRED = "Authentication required"
ROLE_CHANGE_FORBIDDEN = "Only admins can change user roles"
OWNERSHIP_REASONS: dict[UserAction, str] = {
    UserAction.UPDATE: "You can only update your own information",
    UserAction.DELETE: "You can only delete your own account",
}


def check_authenticated(requester: RequesterIdentity | None) -> Decision:
    """Deny as UNAUTHORIZED when no identity is attached to the request."""
    if requester is None:
        return Deny(DenyKind.UNAUTHORIZED, AUTHENTICATION_REQUIRED)
    return ALLOW


def check_owner_or_admin(
    requester: RequesterIdentity, target_id: UserId, action: UserAction,
) -> Decision:
    """Allow iff the requester is the target or holds the admin role."""
    if requester.id == target_id or requester.role is UserRole.ADMIN:
        return ALLOW
    return Deny(DenyKind.FORBIDDEN, OWNERSHIP_REASONS[action])


def check_role_change(
    changes: Mapping[str, object], requester_role: UserRole,
) -> Decision:
    """Deny any payload carrying a `role` key unless the requester is admin."""
    if "role" in changes and requester_role is not UserRole.ADMIN:
        return Deny(DenyKind.FORBIDDEN, ROLE_CHANGE_FORBIDDEN)
    return ALLOW


def evaluate(*checks: Check) -> Decision:
    """Run checks in order. Returns the first Deny, or ALLOW if all pass."""
    for check in checks:
        decision = check()
        if isinstance(decision, Deny):
            return decision
    return ALLOW


def authorize_read(requester: RequesterIdentity | None) -> Decision:
    """List and fetch endpoints require authentication only."""
    return evaluate(partial(check_authenticated, requester))


def authorize_update(
    requester: RequesterIdentity | None,
    target_id: UserId,
    changes: Mapping[str, object],
) -> Decision:
    """authenticated -> owner-or-admin -> role-change."""
    return evaluate(
        partial(check_authenticated, requester),
        lambda: check_owner_or_admin(requester, target_id, UserAction.UPDATE),
        lambda: check_role_change(changes, requester.role),
    )


def authorize_delete(
    requester: RequesterIdentity | None, target_id: UserId,
) -> Decision:
    """authenticated -> owner-or-admin."""
    return evaluate(
        partial(check_authenticated, requester),
        lambda: check_owner_or_admin(requester, target_id, UserAction.DELETE),
    )
