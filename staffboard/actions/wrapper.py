"""
staffboard.actions.wrapper - Server Action Wrapper

Wraps an action handler with:
- input validation against a pydantic schema
- an optional session requirement
- exception-to-ActionResult conversion (via try_catch)
- rollback of the database session on failure

Example:
    >>> @action(schema=CreateClientInput)
    ... async def create_client(ctx: ActionContext, data: CreateClientInput) -> ClientResponse:
    ...     client = Client(organization_id=ctx.organization_id, **data.model_dump())
    ...     ctx.db.add(client)
    ...     await ctx.db.commit()
    ...     return ClientResponse.model_validate(client)
    >>>
    >>> result = await create_client(ctx, {"name": "Acme Corp", ...})
"""

import functools
import logging
from collections.abc import Awaitable, Callable
from dataclasses import replace
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import SQLAlchemyError

from staffboard.actions.context import ActionContext, get_session
from staffboard.actions.errors import classify_error, map_validation_error
from staffboard.actions.result import (
    ActionError,
    ActionResult,
    ErrorCode,
    failure,
    failure_from,
    is_failure,
)
from staffboard.actions.try_catch import try_catch

logger = logging.getLogger(__name__)

T = TypeVar("T")

ActionHandler = Callable[[ActionContext, Any], Awaitable[T]]
Action = Callable[..., Awaitable[ActionResult[Any]]]

# Failures that point at a bug or an outage rather than at the caller
UNEXPECTED_CODES = frozenset({ErrorCode.UNKNOWN, ErrorCode.DATABASE_ERROR})

NOT_LOGGED_IN_MESSAGE = "You must be logged in to perform this action"


def _classifier(action_name: str) -> Callable[[BaseException], ActionError]:
    def classify(exc: BaseException) -> ActionError:
        error = classify_error(exc)
        if error.code in UNEXPECTED_CODES:
            logger.error(
                f"Action {action_name} failed unexpectedly: {error.message}",
                exc_info=exc,
                extra={"action": action_name, "error_code": error.code.value},
            )
        else:
            logger.info(
                f"Action {action_name} failed: {error.code.value}",
                extra={"action": action_name, "error_code": error.code.value},
            )
        return error

    return classify


async def _rollback(ctx: ActionContext, action_name: str) -> None:
    try:
        await ctx.db.rollback()
    except SQLAlchemyError:
        logger.warning(f"Rollback after failed action {action_name} failed", exc_info=True)


def create_action(
    handler: ActionHandler[T],
    *,
    schema: type[BaseModel] | None = None,
    require_auth: bool = True,
) -> Action:
    """
    Build a server action from a handler.

    Args:
        handler: ``async (ctx, data) -> T``; raises on failure
        schema: Pydantic model validating the payload (optional)
        require_auth: Whether the caller must have a session (default True)

    Returns:
        ``async (ctx, payload=None) -> ActionResult[T]``
    """
    action_name = getattr(handler, "__name__", "action")
    classify = _classifier(action_name)

    @functools.wraps(handler)
    async def run(ctx: ActionContext, payload: Any = None) -> ActionResult[T]:
        # Step 1: validate input
        data = payload
        if schema is not None:
            try:
                data = schema.model_validate(payload if payload is not None else {})
            except ValidationError as exc:
                return failure_from(map_validation_error(exc))

        # Step 2: check the session
        if require_auth and not (ctx.session and ctx.session.is_authenticated):
            resolved = await try_catch(lambda: get_session(ctx), classify)
            if is_failure(resolved):
                return resolved
            if not resolved.data.is_authenticated:
                return failure(ErrorCode.UNAUTHORIZED, NOT_LOGGED_IN_MESSAGE)
            ctx = replace(ctx, session=resolved.data)

        # Step 3: run the handler
        result = await try_catch(lambda: handler(ctx, data), classify)
        if is_failure(result):
            await _rollback(ctx, action_name)
        return result

    run.schema = schema  # type: ignore[attr-defined]
    run.require_auth = require_auth  # type: ignore[attr-defined]
    return run


def action(
    *,
    schema: type[BaseModel] | None = None,
    require_auth: bool = True,
) -> Callable[[ActionHandler[T]], Action]:
    """Decorator form of create_action()."""

    def decorator(handler: ActionHandler[T]) -> Action:
        return create_action(handler, schema=schema, require_auth=require_auth)

    return decorator


__all__ = ["UNEXPECTED_CODES", "action", "create_action"]
