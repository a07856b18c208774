# tests/unit/runtime/test_pending.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import asyncio

import pytest

from tests.helpers import later, never
from tfsm.core.errors import PendingStateError
from tfsm.runtime.pending import PendingGuard


def _raise(error):
    raise error


@pytest.fixture
def guard():
    return PendingGuard(_raise)


def test_idle_by_default(guard):
    assert not guard.is_pending


def test_run_sync_returns_result_and_releases(guard):
    seen = []

    def probe(value):
        seen.append(guard.is_pending)
        return value * 2

    assert guard.run_sync(probe, 21) == 42
    assert seen == [True]
    assert not guard.is_pending


def test_run_sync_releases_on_error(guard):
    def broken():
        raise ValueError("broken")

    with pytest.raises(ValueError):
        guard.run_sync(broken)
    assert not guard.is_pending


def test_nested_sync_call_outside_loop_raises(guard):
    with pytest.raises(PendingStateError, match="State machine in pending state."):
        guard.run_sync(lambda: guard.run_sync(lambda: None))
    assert not guard.is_pending


@pytest.mark.asyncio
async def test_nested_sync_call_inside_loop_gets_failed_future(guard):
    rejected = guard.run_sync(lambda: guard.run_sync(lambda: None))
    assert isinstance(rejected, asyncio.Future)
    assert rejected.done()
    with pytest.raises(PendingStateError, match="State machine in pending state."):
        await rejected
    assert not guard.is_pending


@pytest.mark.asyncio
async def test_run_async_takes_flag_before_returning(guard):
    task = guard.run_async(lambda: later("done"))
    assert guard.is_pending
    assert await task == "done"
    assert not guard.is_pending


@pytest.mark.asyncio
async def test_second_async_call_gets_failed_future(guard):
    created = []

    def factory():
        created.append(True)
        return later(None)

    first = guard.run_async(factory)
    second = guard.run_async(factory)

    assert second.done()
    with pytest.raises(PendingStateError):
        await second
    await first
    assert created == [True]


@pytest.mark.asyncio
async def test_flag_cleared_after_failure(guard):
    async def broken():
        raise RuntimeError("hook failed")

    with pytest.raises(RuntimeError):
        await guard.run_async(broken)
    assert not guard.is_pending
    assert await guard.run_async(lambda: later(1)) == 1


@pytest.mark.asyncio
async def test_flag_cleared_after_cancellation(guard):
    task = guard.run_async(never)
    await asyncio.sleep(0)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert not guard.is_pending


@pytest.mark.asyncio
async def test_flag_cleared_when_cancelled_before_start(guard):
    task = guard.run_async(never)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert not guard.is_pending


@pytest.mark.asyncio
async def test_sync_call_while_async_in_flight_gets_failed_future(guard):
    called = []
    task = guard.run_async(lambda: later(None))

    rejected = guard.run_sync(called.append, True)
    assert isinstance(rejected, asyncio.Future)
    with pytest.raises(PendingStateError):
        await rejected
    assert called == []
    await task


@pytest.mark.asyncio
async def test_error_exit_may_replace_pending_error():
    class Replaced(Exception):
        pass

    def handler(error):
        raise Replaced(str(error))

    guard = PendingGuard(handler)
    first = guard.run_async(lambda: later(None))
    with pytest.raises(Replaced):
        await guard.run_async(lambda: later(None))
    await first


def test_run_async_without_loop(guard):
    with pytest.raises(RuntimeError):
        guard.run_async(lambda: later(None))
    assert not guard.is_pending
