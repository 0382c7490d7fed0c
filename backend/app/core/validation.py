"""Request Validation — non-raising schema parse with field-level error formatting.

Invariants:
    - safe_parse never raises for bad input: failure is returned as ParseResult
    - Every formatted detail has exactly `field` and `message`
    - Root-level errors (model validators) are reported under field "(root)"
"""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

ROOT_FIELD = "(root)"


@dataclass(frozen=True)
class ParseResult(Generic[ModelT]):
    success: bool
    data: ModelT | None = None
    error: ValidationError | None = None


def safe_parse(schema: type[ModelT], raw: Any) -> ParseResult[ModelT]:
    """Validate raw input against a pydantic schema without raising."""
    try:
        return ParseResult(success=True, data=schema.model_validate(raw))
    except ValidationError as e:
        return ParseResult(success=False, error=e)


def format_validation_error(error: ValidationError) -> list[dict[str, str]]:
    """Flatten pydantic errors into [{field, message}] pairs."""
    return [
        {
            "field": ".".join(str(loc) for loc in e["loc"]) or ROOT_FIELD,
            "message": e["msg"],
        }
        for e in error.errors()
    ]
