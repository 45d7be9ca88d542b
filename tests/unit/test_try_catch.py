"""
Unit tests for staffboard.actions.try_catch - Exception-to-Result Boundary
"""

import asyncio

import pytest

from staffboard.actions.errors import ActionException
from staffboard.actions.result import ActionError, ErrorCode, is_failure, is_success
from staffboard.actions.try_catch import try_catch


async def _value():
    return 42


async def _boom():
    raise RuntimeError("boom")


@pytest.mark.asyncio
async def test_awaitable_success():
    result = await try_catch(_value())
    assert is_success(result)
    assert result.data == 42


@pytest.mark.asyncio
async def test_callable_returning_awaitable():
    result = await try_catch(lambda: _value())
    assert result.data == 42


@pytest.mark.asyncio
async def test_sync_callable():
    result = await try_catch(lambda: "plain")
    assert result.data == "plain"


@pytest.mark.asyncio
async def test_sync_callable_raising():
    def explode():
        raise ValueError("bad value")

    result = await try_catch(explode)
    assert is_failure(result)
    assert result.error.code == ErrorCode.UNKNOWN
    assert result.error.message == "bad value"


class _Unprintable(Exception):
    def __str__(self):
        raise RuntimeError("no str")


@pytest.mark.asyncio
async def test_unprintable_exception_does_not_escape():
    def explode():
        raise _Unprintable()

    result = await try_catch(explode)
    assert is_failure(result)
    assert result.error.code == ErrorCode.UNKNOWN


@pytest.mark.asyncio
async def test_exception_is_classified():
    result = await try_catch(_boom())
    assert is_failure(result)
    assert result.error.details == {"exception": "RuntimeError"}


@pytest.mark.asyncio
async def test_action_exception_keeps_code():
    async def missing():
        raise ActionException(ErrorCode.NOT_FOUND, "Worker not found")

    result = await try_catch(missing)
    assert result.error.code == ErrorCode.NOT_FOUND
    assert result.error.message == "Worker not found"


@pytest.mark.asyncio
async def test_custom_classifier():
    seen = []

    def classify(exc):
        seen.append(exc)
        return ActionError(code=ErrorCode.DATABASE_ERROR, message="db down")

    result = await try_catch(_boom, classify)
    assert result.error.code == ErrorCode.DATABASE_ERROR
    assert isinstance(seen[0], RuntimeError)


@pytest.mark.asyncio
async def test_foreign_cancellation_becomes_failure():
    """A CancelledError raised by the operation itself, while our task is not cancelled."""

    async def cancelled_inside():
        raise asyncio.CancelledError()

    result = await try_catch(cancelled_inside)
    assert is_failure(result)
    assert result.error.message == "The operation was cancelled"


@pytest.mark.asyncio
async def test_own_cancellation_propagates():
    started = asyncio.Event()

    async def slow():
        started.set()
        await asyncio.sleep(10)

    task = asyncio.create_task(try_catch(slow))
    await started.wait()
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
