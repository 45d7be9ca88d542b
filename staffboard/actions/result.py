"""
staffboard.actions.result - ActionResult Type and Helpers

Unified return value for every server action. A result is exactly one of:

- Success: ``{"success": true, "data": ...}``
- Failure: ``{"success": false, "error": {"code": ..., "message": ...}}``

Results are immutable and only ever handed back to the immediate caller.

Example:
    >>> result = success({"id": "123"})
    >>> if is_success(result):
    ...     print(result.data["id"])
    >>> result = failure(ErrorCode.NOT_FOUND, "Worker not found")
    >>> result.error.code
    <ErrorCode.NOT_FOUND: 'NOT_FOUND'>
"""

from enum import Enum
from typing import Any, Generic, Literal, TypeGuard, TypeVar, Union

from pydantic import BaseModel, ConfigDict
from typing_extensions import TypeAliasType

T = TypeVar("T")


class ErrorCode(str, Enum):
    """Closed taxonomy of action error codes."""

    # Input data
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Identity and permissions
    UNAUTHORIZED = "UNAUTHORIZED"
    SESSION_EXPIRED = "SESSION_EXPIRED"
    FORBIDDEN = "FORBIDDEN"

    # Records
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    HAS_DEPENDENCIES = "HAS_DEPENDENCIES"

    # Throttling
    RATE_LIMITED = "RATE_LIMITED"

    # Infrastructure
    DATABASE_ERROR = "DATABASE_ERROR"
    UNKNOWN = "UNKNOWN"


class ActionError(BaseModel):
    """Structured error carried by a failed ActionResult."""

    model_config = ConfigDict(frozen=True)

    code: ErrorCode
    message: str
    field_errors: dict[str, list[str]] | None = None
    details: dict[str, Any] | None = None


class Success(BaseModel, Generic[T]):
    """Successful action outcome."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    success: Literal[True] = True
    data: T


class Failure(BaseModel):
    """Failed action outcome."""

    model_config = ConfigDict(frozen=True)

    success: Literal[False] = False
    error: ActionError


# Generic alias so annotations can say ActionResult[T]
ActionResult = TypeAliasType("ActionResult", Union[Success[T], Failure], type_params=(T,))


class ActionFailedError(Exception):
    """Raised by unwrap() when the result is a failure."""

    def __init__(self, error: ActionError) -> None:
        super().__init__(f"{error.code.value}: {error.message}")
        self.error = error


def success(data: T) -> Success[T]:
    """Wrap data in a successful ActionResult."""
    return Success(data=data)


def failure(
    code: ErrorCode,
    message: str,
    field_errors: dict[str, list[str]] | None = None,
    details: dict[str, Any] | None = None,
) -> Failure:
    """
    Build a failed ActionResult.

    Args:
        code: Error code from the ErrorCode taxonomy
        message: Human-readable message for UI display
        field_errors: Optional per-field validation messages
        details: Optional extra context (constraint names, original codes)

    Returns:
        Failure carrying an ActionError

    Example:
        >>> failure(
        ...     ErrorCode.VALIDATION_ERROR,
        ...     "Invalid input",
        ...     field_errors={"email": ["Invalid email"]},
        ... )
    """
    return Failure(
        error=ActionError(
            code=code,
            message=message,
            field_errors=field_errors,
            details=details,
        )
    )


def failure_from(error: ActionError) -> Failure:
    """Wrap an already classified ActionError."""
    return Failure(error=error)


def is_success(result: ActionResult[T]) -> TypeGuard[Success[T]]:
    """Return True if the result is a Success."""
    return result.success is True


def is_failure(result: ActionResult[T]) -> TypeGuard[Failure]:
    """Return True if the result is a Failure."""
    return result.success is False


def unwrap(result: ActionResult[T]) -> T:
    """Return the data of a Success or raise ActionFailedError."""
    if isinstance(result, Failure):
        raise ActionFailedError(result.error)
    return result.data


def unwrap_or(result: ActionResult[T], default: T) -> T:
    """Return the data of a Success, or default for a Failure."""
    if isinstance(result, Failure):
        return default
    return result.data
