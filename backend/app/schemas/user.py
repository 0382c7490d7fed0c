"""User Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - UserIdParams.id: decimal digits only, no sign, no leading zero, and within
      the int4 range of the users.id column
    - UserUpdate: only name, email, role accepted; unknown fields rejected
    - UserUpdate: at least one field present; explicit nulls rejected
    - UserResponse never exposes the password hash

Design Decisions:
    - str_strip_whitespace on UserUpdate: trims before length constraints apply
    - null rejection via before-validator: validators skip defaults, so only an
      explicit `null` in the body reaches it
    - id digits checked on the raw string: int coercion alone accepts "+1",
      "1_0" and "1.0"
"""

import re
from datetime import datetime

from pydantic import (
    BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator,
)

from app.core.domain_types import UserRole

MAX_EMAIL_LENGTH = 255
MAX_USER_ID = 2_147_483_647
USER_ID_PATTERN = re.compile(r"[1-9][0-9]*")


class UserIdParams(BaseModel):
    """Path parameters for /users/{id}."""
    id: int = Field(gt=0, le=MAX_USER_ID)

    @field_validator("id", mode="before")
    @classmethod
    def require_plain_digits(cls, v):
        if isinstance(v, str) and not USER_ID_PATTERN.fullmatch(v):
            raise ValueError("id must be a positive integer")
        return v


class UserUpdate(BaseModel):
    """Partial user update. Every field optional, at least one required."""
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str | None = Field(None, min_length=2, max_length=255)
    email: EmailStr | None = None
    role: UserRole | None = None

    @field_validator("name", "email", "role", mode="before")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("field cannot be null")
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        if len(v) > MAX_EMAIL_LENGTH:
            raise ValueError(f"email must be at most {MAX_EMAIL_LENGTH} characters")
        return v.lower()

    @model_validator(mode="after")
    def require_one_field(self):
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided to update")
        return self

    def changes(self) -> dict:
        """Only the fields the client sent, JSON-ready (role as plain string)."""
        return self.model_dump(exclude_unset=True, mode="json")


class UserResponse(BaseModel):
    """User response — public-facing user data."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: UserRole
    created_at: datetime
    updated_at: datetime
