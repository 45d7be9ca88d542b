"""
staffboard.actions.try_catch - Exception-to-Result Boundary

try_catch is the one place where exception-based control flow turns into
an ActionResult value. It never lets an exception escape, except for the
cancellation of the task that is running it.

Example:
    >>> result = await try_catch(lambda: auth.get_user(token))
    >>> if is_failure(result):
    ...     print(result.error.code)
"""

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from typing import TypeVar

from staffboard.actions.errors import classify_error
from staffboard.actions.result import ActionError, ActionResult, failure_from, success

T = TypeVar("T")

Operation = Awaitable[T] | Callable[[], Awaitable[T] | T]
Classifier = Callable[[BaseException], ActionError]


def _task_is_cancelling() -> bool:
    task = asyncio.current_task()
    return task is not None and task.cancelling() > 0


async def try_catch(
    operation: Operation[T],
    classify: Classifier = classify_error,
) -> ActionResult[T]:
    """
    Run an operation and wrap its outcome in an ActionResult.

    Args:
        operation: An awaitable, or a zero-argument callable returning a
            value or an awaitable
        classify: Maps a raised exception to an ActionError

    Returns:
        Success with the operation's value, or Failure with the classified error
    """
    try:
        if callable(operation):
            value = operation()
            if inspect.isawaitable(value):
                value = await value
        else:
            value = await operation
    except asyncio.CancelledError as exc:
        # Our own task is being cancelled: let asyncio finish the job
        if _task_is_cancelling():
            raise
        return failure_from(classify(exc))
    except Exception as exc:
        return failure_from(classify(exc))
    return success(value)


__all__ = ["try_catch"]
