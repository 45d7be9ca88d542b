"""
staffboard.actions - Action Result Layer

Normalizes the outcome of every fallible async operation into an
ActionResult with a closed ErrorCode taxonomy.

Usage:
    >>> from staffboard.actions import try_catch, is_success
    >>> result = await try_catch(lambda: auth.get_user(token))
    >>> if is_success(result):
    ...     print(result.data.email)
"""

from staffboard.actions.context import (
    ANONYMOUS,
    ActionContext,
    SessionResult,
    get_session,
    require_session,
)
from staffboard.actions.errors import (
    ActionException,
    AuthenticationError,
    classify_error,
    map_auth_error,
    map_database_error,
    map_validation_error,
)
from staffboard.actions.result import (
    ActionError,
    ActionFailedError,
    ActionResult,
    ErrorCode,
    Failure,
    Success,
    failure,
    failure_from,
    is_failure,
    is_success,
    success,
    unwrap,
    unwrap_or,
)
from staffboard.actions.try_catch import try_catch
from staffboard.actions.wrapper import action, create_action

__all__ = [
    "ANONYMOUS",
    "ActionContext",
    "ActionError",
    "ActionException",
    "ActionFailedError",
    "ActionResult",
    "AuthenticationError",
    "ErrorCode",
    "Failure",
    "SessionResult",
    "Success",
    "action",
    "classify_error",
    "create_action",
    "failure",
    "failure_from",
    "get_session",
    "is_failure",
    "is_success",
    "map_auth_error",
    "map_database_error",
    "map_validation_error",
    "require_session",
    "success",
    "try_catch",
    "unwrap",
    "unwrap_or",
]
