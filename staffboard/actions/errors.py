"""
staffboard.actions.errors - Error Classification

Maps the failure signals of the backends (auth service, Postgres, pydantic)
onto the closed ErrorCode taxonomy:

- ActionException: raised by action handlers for domain failures
- map_auth_error: auth service error codes / statuses
- map_database_error: Postgres SQLSTATE codes
- map_validation_error: pydantic ValidationError -> field errors
- classify_error: total dispatcher used by try_catch and the action wrapper
"""

import asyncio
import logging
import re
from collections.abc import Mapping
from typing import Any

import httpx
from pydantic import ValidationError
from sqlalchemy.exc import DBAPIError, NoResultFound, SQLAlchemyError

from staffboard.actions.result import ActionError, ErrorCode
from staffboard.auth.errors import AuthApiError

logger = logging.getLogger(__name__)


class ActionException(Exception):
    """
    Domain failure raised inside an action handler.

    The action wrapper converts it into a Failure with the same code,
    message and field errors.

    Example:
        >>> raise ActionException(ErrorCode.NOT_FOUND, "Client not found")
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        field_errors: dict[str, list[str]] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.field_errors = field_errors
        self.details = details

    def to_error(self) -> ActionError:
        return ActionError(
            code=self.code,
            message=self.message,
            field_errors=self.field_errors,
            details=self.details,
        )


class AuthenticationError(ActionException):
    """Raised when an action requires a session and there is none."""

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(ErrorCode.UNAUTHORIZED, message)


# ============================================================================
# Auth service errors
# ============================================================================

SESSION_EXPIRED_MESSAGE = "Your session has expired. Please log in again."
GENERIC_AUTH_MESSAGE = "An authentication error occurred. Please try again."

AUTH_ERROR_TABLE: dict[str, tuple[ErrorCode, str]] = {
    # Credentials
    "invalid_credentials": (ErrorCode.UNAUTHORIZED, "Invalid email or password"),
    "invalid_grant": (ErrorCode.UNAUTHORIZED, "Invalid email or password"),
    # Confirmation
    "email_not_confirmed": (
        ErrorCode.FORBIDDEN,
        "Please confirm your email address before logging in",
    ),
    "phone_not_confirmed": (
        ErrorCode.FORBIDDEN,
        "Please confirm your phone number before logging in",
    ),
    # Session / JWT
    "session_expired": (ErrorCode.SESSION_EXPIRED, SESSION_EXPIRED_MESSAGE),
    "session_not_found": (ErrorCode.SESSION_EXPIRED, SESSION_EXPIRED_MESSAGE),
    "refresh_token_not_found": (ErrorCode.SESSION_EXPIRED, SESSION_EXPIRED_MESSAGE),
    "refresh_token_already_used": (ErrorCode.SESSION_EXPIRED, SESSION_EXPIRED_MESSAGE),
    "bad_jwt": (ErrorCode.SESSION_EXPIRED, SESSION_EXPIRED_MESSAGE),
    "no_authorization": (ErrorCode.SESSION_EXPIRED, SESSION_EXPIRED_MESSAGE),
    # OTP
    "otp_expired": (
        ErrorCode.SESSION_EXPIRED,
        "The verification code has expired. Please request a new one.",
    ),
    "otp_disabled": (ErrorCode.FORBIDDEN, "This sign-in method is not available"),
    # Passwords
    "weak_password": (
        ErrorCode.VALIDATION_ERROR,
        "Password does not meet security requirements",
    ),
    "same_password": (
        ErrorCode.VALIDATION_ERROR,
        "New password must be different from current password",
    ),
    # Rate limiting
    "over_request_rate_limit": (
        ErrorCode.RATE_LIMITED,
        "Too many requests. Please wait a moment and try again.",
    ),
    "over_email_send_rate_limit": (
        ErrorCode.RATE_LIMITED,
        "Too many requests. Please wait a moment and try again.",
    ),
    "over_sms_send_rate_limit": (
        ErrorCode.RATE_LIMITED,
        "Too many requests. Please wait a moment and try again.",
    ),
    # Accounts
    "user_not_found": (ErrorCode.NOT_FOUND, "No account found with this email address"),
    "user_already_exists": (ErrorCode.CONFLICT, "An account with this email already exists"),
    "email_exists": (ErrorCode.CONFLICT, "An account with this email already exists"),
    "validation_failed": (ErrorCode.VALIDATION_ERROR, "Invalid input provided"),
    # Providers
    "signup_disabled": (ErrorCode.FORBIDDEN, "This sign-in method is currently disabled"),
    "email_provider_disabled": (
        ErrorCode.FORBIDDEN,
        "This sign-in method is currently disabled",
    ),
    "phone_provider_disabled": (
        ErrorCode.FORBIDDEN,
        "This sign-in method is currently disabled",
    ),
    "provider_disabled": (ErrorCode.FORBIDDEN, "This sign-in method is currently disabled"),
    "user_banned": (ErrorCode.FORBIDDEN, "This account has been suspended"),
}

# Fallback when the error code is unknown but an HTTP status is present
AUTH_STATUS_TABLE: dict[int, ErrorCode] = {
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.FORBIDDEN,
    404: ErrorCode.NOT_FOUND,
    422: ErrorCode.VALIDATION_ERROR,
    429: ErrorCode.RATE_LIMITED,
}

# Codes whose original message is worth passing on to the UI
_KEEP_ORIGINAL_MESSAGE = {"weak_password", "validation_failed"}


def _read_signal(error: object, name: str) -> Any:
    if isinstance(error, Mapping):
        return error.get(name)
    return getattr(error, name, None)


def map_auth_error(error: object) -> ActionError:
    """
    Classify an auth service error into the ErrorCode taxonomy.

    Pure and total: accepts AuthApiError instances, any object exposing
    ``code`` / ``status`` attributes, or a mapping with those keys.
    Unrecognized input yields ErrorCode.UNKNOWN.

    Args:
        error: Native auth error signal

    Returns:
        ActionError with a user-facing message
    """
    code = _read_signal(error, "code")
    status = _read_signal(error, "status")
    original_message = _read_signal(error, "message")

    if isinstance(code, str) and code in AUTH_ERROR_TABLE:
        error_code, message = AUTH_ERROR_TABLE[code]
        details = None
        if code in _KEEP_ORIGINAL_MESSAGE and original_message:
            details = {"original_message": str(original_message)}
        return ActionError(code=error_code, message=message, details=details)

    details = {
        key: value
        for key, value in (
            ("code", code),
            ("status", status),
            ("original_message", original_message),
        )
        if value is not None
    }

    if isinstance(status, int) and status in AUTH_STATUS_TABLE:
        return ActionError(
            code=AUTH_STATUS_TABLE[status],
            message=GENERIC_AUTH_MESSAGE,
            details=details or None,
        )

    return ActionError(
        code=ErrorCode.UNKNOWN,
        message=GENERIC_AUTH_MESSAGE,
        details=details or None,
    )


# ============================================================================
# Postgres errors
# ============================================================================

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
NOT_NULL_VIOLATION = "23502"
CHECK_VIOLATION = "23514"
INSUFFICIENT_PRIVILEGE = "42501"

_COLUMN_PATTERN = re.compile(r'column "([^"]+)"')


def _sqlstate(exc: DBAPIError) -> str | None:
    orig = exc.orig
    for candidate in (orig, getattr(orig, "__cause__", None)):
        if candidate is None:
            continue
        code = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if code:
            return str(code)
    return None


def _pg_attr(exc: DBAPIError, name: str) -> str | None:
    orig = exc.orig
    for candidate in (orig, getattr(orig, "__cause__", None)):
        value = getattr(candidate, name, None) if candidate is not None else None
        if value:
            return str(value)
    return None


# How each unique column is named in user-facing messages
DUPLICATE_FIELD_LABELS = {"phone": "phone number", "email": "email", "name": "name"}


def duplicate_field_message(detail: str | None) -> str:
    """Build a message naming the duplicated field, if it can be identified."""
    field = duplicate_field(detail)
    if field is not None:
        return f"A record with this {DUPLICATE_FIELD_LABELS[field]} already exists"
    return "A record with this value already exists"


def duplicate_field(detail: str | None) -> str | None:
    if detail:
        for field in ("phone", "email", "name"):
            if field in detail:
                return field
    return None


def map_database_error(exc: DBAPIError) -> ActionError:
    """
    Classify a database error by its Postgres SQLSTATE code.

    Args:
        exc: SQLAlchemy DBAPIError wrapping the driver exception

    Returns:
        ActionError with an appropriate code and message
    """
    sqlstate = _sqlstate(exc)
    detail = _pg_attr(exc, "detail")
    constraint = _pg_attr(exc, "constraint_name")

    if sqlstate == UNIQUE_VIOLATION:
        field = duplicate_field(detail) or duplicate_field(constraint)
        details: dict[str, Any] = {"constraint": constraint or detail}
        if field:
            details["field"] = field
        return ActionError(
            code=ErrorCode.CONFLICT,
            message=duplicate_field_message(detail or constraint),
            details=details,
        )

    if sqlstate == FOREIGN_KEY_VIOLATION:
        return ActionError(
            code=ErrorCode.HAS_DEPENDENCIES,
            message="This record cannot be deleted because other records depend on it",
            details={"constraint": constraint or detail},
        )

    if sqlstate == NOT_NULL_VIOLATION:
        column = _pg_attr(exc, "column_name")
        if column is None:
            match = _COLUMN_PATTERN.search(str(exc.orig))
            column = match.group(1) if match else None
        return ActionError(
            code=ErrorCode.VALIDATION_ERROR,
            message="A required field is missing",
            field_errors={column: ["This field is required"]} if column else None,
            details={"field": column} if column else None,
        )

    if sqlstate == CHECK_VIOLATION:
        return ActionError(
            code=ErrorCode.VALIDATION_ERROR,
            message="The provided value does not meet requirements",
            details={"constraint": constraint or detail},
        )

    if sqlstate == INSUFFICIENT_PRIVILEGE:
        return ActionError(
            code=ErrorCode.FORBIDDEN,
            message="You do not have permission to perform this action",
        )

    return ActionError(
        code=ErrorCode.DATABASE_ERROR,
        message="An unexpected database error occurred. Please try again.",
        details={"original_code": sqlstate, "original_message": str(exc.orig)},
    )


# ============================================================================
# Validation errors
# ============================================================================


def _issue_message(issue: Mapping[str, Any]) -> str:
    # ValueErrors raised by our own validators carry the message we want
    if issue.get("type") == "value_error":
        ctx = issue.get("ctx") or {}
        if "error" in ctx:
            return str(ctx["error"])
    return str(issue.get("msg", "Invalid value"))


def map_validation_issues(issues: list[Mapping[str, Any]], skip_prefix: int = 0) -> ActionError:
    """
    Convert pydantic-style error dicts into a VALIDATION_ERROR.

    Args:
        issues: Items of ValidationError.errors()
        skip_prefix: Number of leading location parts to drop (e.g. "body")

    Returns:
        ActionError with field_errors keyed by dotted path
    """
    field_errors: dict[str, list[str]] = {}
    for issue in issues:
        loc = [str(part) for part in issue.get("loc", ())][skip_prefix:]
        path = ".".join(loc) or "_root"
        field_errors.setdefault(path, []).append(_issue_message(issue))

    if issues:
        first = issues[0]
        first_path = ".".join(str(part) for part in first.get("loc", ())[skip_prefix:])
        message = f"{first_path or 'Input'}: {_issue_message(first)}"
    else:
        message = "Invalid input data"

    return ActionError(
        code=ErrorCode.VALIDATION_ERROR,
        message=message,
        field_errors=field_errors,
    )


def map_validation_error(exc: ValidationError) -> ActionError:
    """Convert a pydantic ValidationError into a VALIDATION_ERROR."""
    return map_validation_issues(exc.errors(include_url=False))


# ============================================================================
# Dispatcher
# ============================================================================


def _describe(exc: BaseException) -> str:
    try:
        return str(exc)
    except Exception:
        return ""


def classify_error(exc: BaseException) -> ActionError:
    """
    Classify any exception into exactly one ActionError.

    Args:
        exc: Exception raised by a wrapped operation

    Returns:
        ActionError (never raises)
    """
    if isinstance(exc, ActionException):
        return exc.to_error()

    if isinstance(exc, ValidationError):
        return map_validation_error(exc)

    if isinstance(exc, AuthApiError):
        return map_auth_error(exc)

    if isinstance(exc, NoResultFound):
        return ActionError(
            code=ErrorCode.NOT_FOUND,
            message="The requested resource was not found",
        )

    if isinstance(exc, DBAPIError):
        return map_database_error(exc)

    if isinstance(exc, SQLAlchemyError):
        return ActionError(
            code=ErrorCode.DATABASE_ERROR,
            message="An unexpected database error occurred. Please try again.",
            details={"original_message": _describe(exc)},
        )

    if isinstance(exc, httpx.HTTPError):
        return ActionError(
            code=ErrorCode.UNKNOWN,
            message="The authentication service could not be reached. Please try again.",
            details={"original_message": _describe(exc)},
        )

    if isinstance(exc, asyncio.CancelledError):
        return ActionError(code=ErrorCode.UNKNOWN, message="The operation was cancelled")

    message = _describe(exc).strip()
    return ActionError(
        code=ErrorCode.UNKNOWN,
        message=message or "An unexpected error occurred. Please try again.",
        details={"exception": type(exc).__name__},
    )


__all__ = [
    "AUTH_ERROR_TABLE",
    "ActionException",
    "AuthenticationError",
    "classify_error",
    "duplicate_field_message",
    "map_auth_error",
    "map_database_error",
    "map_validation_error",
    "map_validation_issues",
]
