"""Error Hierarchy — typed, categorized exceptions for all Users API failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Every error has a short title surfaced as the `error` field of the response
    - Unauthorized (401) and Forbidden (403) are distinct classes, never conflated
    - Not-found is signalled by UserNotFoundError type, never by message text
    - A duplicate email is a client conflict (409), never a database outage
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with UsersApiError base: one global handler catches all
    - ErrorContext as dataclass: observability data without coupling to logging
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: int | None = None
    requester_id: int | None = None
    debug_info: dict[str, Any] | None = None


class UsersApiError(Exception):
    """Base exception for all Users API errors."""

    title = "Error"

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": self.title,
            "message": self.message,
            "code": self.code,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
        }


# ─── Request Errors (400-level) ─────────────────────────────────

class RequestValidationFailedError(UsersApiError):
    """Path or body input failed schema validation."""

    title = "Validation failed"

    def __init__(
        self,
        details: list[dict[str, str]],
        source: str,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Invalid request {source}", "VALIDATION_ERROR",
            ErrorCategory.VALIDATION, ErrorSeverity.WARNING, context, 400,
        )
        self.details = details
        self.source = source

    def to_response(self) -> dict:
        response = super().to_response()
        response["details"] = self.details
        return response


class UnauthorizedError(UsersApiError):
    """No authenticated identity attached to the request."""

    title = "Unauthorized"

    def __init__(
        self,
        message: str = "Authentication required",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "UNAUTHORIZED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class ForbiddenError(UsersApiError):
    """Authenticated requester lacks the privilege for this action."""

    title = "Forbidden"

    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "FORBIDDEN", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )


class UserNotFoundError(UsersApiError):
    """Target user does not exist."""

    title = "User not found"

    def __init__(self, user_id: int, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.user_id = user_id
        super().__init__(
            f"User '{user_id}' not found", "USER_NOT_FOUND",
            ErrorCategory.RESOURCE_NOT_FOUND, ErrorSeverity.ERROR, ctx, 404,
        )
        self.user_id = user_id


class EmailAlreadyInUseError(UsersApiError):
    """Another user already holds the requested email address."""

    title = "Email already in use"

    def __init__(self, email: str, context: ErrorContext | None = None):
        super().__init__(
            f"Email '{email}' is already in use", "EMAIL_CONFLICT",
            ErrorCategory.CONFLICT, ErrorSeverity.WARNING, context, 409,
        )
        self.email = email


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(UsersApiError):
    """Database operation failed."""

    title = "Service unavailable"

    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
