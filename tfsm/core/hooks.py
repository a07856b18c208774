# tfsm/core/hooks.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Optional, Tuple

from tfsm.core.errors import HookTimeoutError, StateMachineError
from tfsm.runtime.timers import wait_with_timeout

if TYPE_CHECKING:
    from tfsm.core.state_machine import StateMachine
    from tfsm.core.states import State
    from tfsm.core.transitions import Transition
    from tfsm.interfaces.types import Hook

logger = logging.getLogger(__name__)


class HookPhase(Enum):
    """
    The eight pipeline phases of a transition attempt, in execution order.
    The current-state pointer moves between BEFORE_TRANSITION and AFTER_TRANSITION.
    """

    AFTER_EACH_STATE = 1
    AFTER_STATE = 2
    BEFORE_EACH_TRANSITION = 3
    BEFORE_TRANSITION = 4
    AFTER_TRANSITION = 5
    AFTER_EACH_TRANSITION = 6
    BEFORE_STATE = 7
    BEFORE_EACH_STATE = 8

    @property
    def commits_state(self) -> bool:
        """True for phases that run after the pointer has been swapped."""
        return self.value > HookPhase.BEFORE_TRANSITION.value


@dataclass(frozen=True)
class HookContext:
    """
    The container passed as the first argument to every hook.

    ``transport`` is the machine's live transport dict, shared with every other
    hook of the same run.
    """

    transition: "Transition"
    from_state: "State"
    to_state: "State"
    transport: Dict[Any, Any]
    machine: "StateMachine"


def as_hook_list(hooks: Any) -> List["Hook"]:
    """
    Normalize one hook, a sequence of hooks, or None into a fresh list.

    :raises TypeError: If any element is not callable.
    """
    if hooks is None:
        return []
    if callable(hooks):
        return [hooks]
    if isinstance(hooks, (str, bytes)) or not isinstance(hooks, Iterable):
        raise TypeError(f"Hooks must be callables, got {type(hooks).__name__}")

    result = list(hooks)
    for hook in result:
        if not callable(hook):
            raise TypeError(f"Hooks must be callables, got {type(hook).__name__}")
    return result


class HookRunner:
    """
    Runs hook lists serially. A list is "ok" unless one of its hooks returns
    (or resolves to) the literal False, in which case the remaining hooks of
    that list are skipped.
    """

    def __init__(self, timeout: Optional[float], on_error: Callable[[StateMachineError], Any]) -> None:
        """
        :param timeout: Per-hook timeout in seconds, or None to wait indefinitely.
        :param on_error: The machine's error exit; expected to raise.
        """
        self._timeout = timeout
        self._on_error = on_error

    async def run(
        self,
        phase: HookPhase,
        hooks: List["Hook"],
        context: HookContext,
        args: Tuple[Any, ...] = (),
        kwargs: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """
        Invoke ``hooks`` one at a time with ``context`` and the caller's extra arguments.

        :return: False if a hook vetoed, True otherwise.
        :raises HookTimeoutError: Through the error exit, if a hook exceeds the timeout.
        """
        kwargs = kwargs or {}
        # Snapshot the list: registrations made by a running hook apply to the next run.
        for index, hook in enumerate(list(hooks)):
            result = hook(context, *args, **kwargs)
            if inspect.isawaitable(result):
                result = await self._settle(result)
            if result is False:
                logger.debug(
                    "Hook %d of phase %s vetoed %r (needs rollback: %s)",
                    index,
                    phase.name,
                    context.transition.name,
                    phase.commits_state,
                )
                return False
        return True

    async def _settle(self, awaitable: Any) -> Any:
        return await wait_with_timeout(awaitable, self._timeout, self._expired)

    def _expired(self) -> Any:
        return self._on_error(HookTimeoutError("Timeout has occurred."))
