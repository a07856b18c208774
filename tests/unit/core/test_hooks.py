# tests/unit/core/test_hooks.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import asyncio

import pytest

from tests.helpers import later, never
from tfsm.core.errors import HookTimeoutError
from tfsm.core.hooks import HookContext, HookPhase, HookRunner, as_hook_list
from tfsm.core.states import State
from tfsm.core.transitions import Transition


def _raise(error):
    raise error


@pytest.fixture
def context():
    return HookContext(
        transition=Transition("GO", "A", "B"),
        from_state=State("A"),
        to_state=State("B"),
        transport={},
        machine=None,
    )


@pytest.fixture
def runner():
    return HookRunner(timeout=None, on_error=_raise)


def test_phases_in_execution_order():
    assert [phase.value for phase in HookPhase] == list(range(1, 9))
    assert HookPhase.AFTER_EACH_STATE.value == 1
    assert HookPhase.BEFORE_EACH_STATE.value == 8


def test_commits_state_only_after_pointer_swap():
    assert not HookPhase.BEFORE_TRANSITION.commits_state
    assert HookPhase.AFTER_TRANSITION.commits_state
    assert [phase for phase in HookPhase if phase.commits_state] == [
        HookPhase.AFTER_TRANSITION,
        HookPhase.AFTER_EACH_TRANSITION,
        HookPhase.BEFORE_STATE,
        HookPhase.BEFORE_EACH_STATE,
    ]


def test_context_is_frozen(context):
    with pytest.raises(AttributeError):
        context.transport = {"replaced": True}


def test_as_hook_list_variants():
    def hook(ctx):
        return None

    assert as_hook_list(None) == []
    assert as_hook_list(hook) == [hook]
    assert as_hook_list([hook, hook]) == [hook, hook]
    assert as_hook_list((hook,)) == [hook]


def test_as_hook_list_returns_new_list():
    hooks = [lambda ctx: None]
    assert as_hook_list(hooks) is not hooks


@pytest.mark.parametrize("value", ["hook", 42, [print, "x"]])
def test_as_hook_list_rejects_non_callables(value):
    with pytest.raises(TypeError):
        as_hook_list(value)


@pytest.mark.asyncio
async def test_empty_list_is_ok(runner, context):
    assert await runner.run(HookPhase.AFTER_STATE, [], context) is True


@pytest.mark.asyncio
async def test_hooks_run_in_order_with_arguments(runner, context):
    calls = []

    def first(ctx, *args, **kwargs):
        calls.append(("first", ctx, args, kwargs))

    async def second(ctx, *args, **kwargs):
        calls.append(("second", ctx, args, kwargs))
        return True

    ok = await runner.run(HookPhase.BEFORE_STATE, [first, second], context, (1,), {"flag": True})
    assert ok is True
    assert calls == [("first", context, (1,), {"flag": True}), ("second", context, (1,), {"flag": True})]


@pytest.mark.asyncio
@pytest.mark.parametrize("result", [None, 0, "", [], True])
async def test_only_literal_false_vetoes(runner, context, result):
    assert await runner.run(HookPhase.AFTER_STATE, [lambda ctx: result], context) is True


@pytest.mark.asyncio
async def test_veto_skips_remaining_hooks(runner, context):
    calls = []

    def veto(ctx):
        calls.append("veto")
        return False

    def skipped(ctx):
        calls.append("skipped")

    assert await runner.run(HookPhase.BEFORE_TRANSITION, [veto, skipped], context) is False
    assert calls == ["veto"]


@pytest.mark.asyncio
async def test_awaitable_false_vetoes(runner, context):
    assert await runner.run(HookPhase.AFTER_TRANSITION, [lambda ctx: later(False)], context) is False


@pytest.mark.asyncio
async def test_hook_exception_propagates(runner, context):
    def broken(ctx):
        raise KeyError("boom")

    with pytest.raises(KeyError):
        await runner.run(HookPhase.AFTER_STATE, [broken], context)


@pytest.mark.asyncio
async def test_hooks_added_during_run_wait_for_next_run(runner, context):
    calls = []
    hooks = []

    def late(ctx):
        calls.append("late")

    def registering(ctx):
        calls.append("registering")
        hooks.append(late)

    hooks.append(registering)
    await runner.run(HookPhase.AFTER_STATE, hooks, context)
    assert calls == ["registering"]

    await runner.run(HookPhase.AFTER_STATE, hooks, context)
    assert calls == ["registering", "registering", "late"]


@pytest.mark.asyncio
@pytest.mark.timing
async def test_timeout_goes_through_error_exit(context):
    seen = []

    def on_error(error):
        seen.append(error)
        raise error

    runner = HookRunner(timeout=0.01, on_error=on_error)
    with pytest.raises(HookTimeoutError, match="Timeout has occurred."):
        await runner.run(HookPhase.BEFORE_STATE, [lambda ctx: never()], context)
    assert len(seen) == 1


@pytest.mark.asyncio
@pytest.mark.timing
async def test_fast_hook_within_timeout(context):
    runner = HookRunner(timeout=1.0, on_error=_raise)
    assert await runner.run(HookPhase.BEFORE_STATE, [lambda ctx: later(True)], context) is True


@pytest.mark.asyncio
@pytest.mark.timing
async def test_timeout_applies_per_hook(context):
    runner = HookRunner(timeout=0.05, on_error=_raise)
    hooks = [lambda ctx: later(None, 0.03), lambda ctx: later(None, 0.03)]
    assert await runner.run(HookPhase.BEFORE_STATE, hooks, context) is True


@pytest.mark.asyncio
async def test_no_timeout_waits_for_slow_hook(runner, context):
    assert await runner.run(HookPhase.BEFORE_STATE, [lambda ctx: later(False, 0.02)], context) is False


def test_runner_is_reusable_across_loops(runner, context):
    assert asyncio.run(runner.run(HookPhase.AFTER_STATE, [lambda ctx: None], context)) is True


@pytest.mark.asyncio
async def test_hook_own_timeout_error_propagates(context):
    seen = []

    def on_error(error):
        seen.append(error)
        raise error

    async def remote_call(ctx):
        raise asyncio.TimeoutError("remote call timed out")

    runner = HookRunner(timeout=5, on_error=on_error)
    with pytest.raises(asyncio.TimeoutError, match="remote call timed out"):
        await runner.run(HookPhase.BEFORE_TRANSITION, [remote_call], context)
    assert seen == []
