# tfsm/core/state_machine.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, List, Mapping, NoReturn, Optional, Sequence, Tuple, Union

from tfsm.config import MachineConfig
from tfsm.core.errors import (
    AbsentStateError,
    AbsentTransitionError,
    StateMachineError,
    UnavailableStateError,
    UnavailableTransitionError,
)
from tfsm.core.graph import StateGraph
from tfsm.core.hooks import HookContext, HookPhase, HookRunner, as_hook_list
from tfsm.core.snapshot import HydratedState
from tfsm.core.sources import SourceKind, classify_source, resolve_callable, resolve_source
from tfsm.core.states import State
from tfsm.core.transitions import Transition
from tfsm.core.validations import Validator
from tfsm.interfaces.types import Arrayable, Hook, Source, StateName, TransitionName, Transport
from tfsm.runtime.pending import PendingGuard

logger = logging.getLogger(__name__)

StatesSpec = Union[Sequence[Union[State, Mapping[str, Any]]], Mapping[str, Any]]
TransitionsSpec = Union[Sequence[Union[Transition, Mapping[str, Any]]], Mapping[str, Any]]


def _unpack_spec(spec: Any, key: str) -> Tuple[List[Any], List[Hook], List[Hook]]:
    """
    Split a ``{key: [...], "before": hooks, "after": hooks}`` mapping (or a
    bare sequence of records) into records and machine-wide hook lists.
    """
    if isinstance(spec, Mapping):
        records = spec[key] if key in spec else spec.get("list", [])
        return list(records), as_hook_list(spec.get("before")), as_hook_list(spec.get("after"))
    return list(spec), [], []


class StateMachine:
    """
    A finite state machine over a fixed set of named states and named
    transitions.

    Every state change runs an eight-phase hook pipeline; any hook may veto by
    returning False, in which case the machine ends up in the state it started
    from. At most one guarded operation (transition or predicate) may be in
    flight at a time.

    Example:
        machine = StateMachine(
            "SOLID",
            [{"name": "SOLID", "data": -100}, {"name": "LIQUID", "data": 50}],
            [{"name": "MELT", "from": "SOLID", "to": "LIQUID"}],
        )
        await machine.transit_to("LIQUID")
    """

    def __init__(
        self,
        initial_state: StateName,
        states: StatesSpec,
        transitions: TransitionsSpec,
        config: Union[MachineConfig, Mapping[str, Any], None] = None,
    ) -> None:
        """
        :param initial_state: Name of the state the machine starts in.
        :param states: State records, or a mapping with ``states`` plus optional
                       machine-wide ``before``/``after`` state hooks.
        :param transitions: Transition records, or a mapping with ``transitions``
                            plus optional machine-wide ``before``/``after``
                            transition hooks.
        :param config: A MachineConfig or a mapping with ``on_error``/``timeout``.
        :raises DuplicatedStateError: Two states share a name.
        :raises AbsentStateError: A transition references an undeclared state,
                                  or ``initial_state`` is undeclared.
        :raises DuplicatedTransitionError: Two transitions share ``(from_state, name)``.
        """
        self._config = MachineConfig.from_value(config)
        self._transport: Transport = {}

        state_records, self._before_each_state, self._after_each_state = _unpack_spec(states, "states")
        transition_records, self._before_each_transition, self._after_each_transition = _unpack_spec(
            transitions, "transitions"
        )

        normalized_states = [State.from_value(record) for record in state_records]
        normalized_transitions = [Transition.from_value(record) for record in transition_records]
        Validator(self._on_error).validate(normalized_states, normalized_transitions)
        self._graph = StateGraph(normalized_states, normalized_transitions)

        self._guard = PendingGuard(self._on_error)
        self._hook_runner = HookRunner(self._config.timeout, self._on_error)

        initial = self._graph.find_state(initial_state)
        if initial is None:
            self._on_error(AbsentStateError(f"State with name {initial_state} does not exist."))
        self._current_state: State = initial

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def state(self) -> StateName:
        """Name of the current state."""
        return self._current_state.name

    @property
    def data(self) -> Any:
        """Payload of the current state."""
        return self._current_state.data

    @property
    def transport(self) -> Transport:
        """The live transport dict shared by hooks and persisted in snapshots."""
        return self._transport

    @property
    def is_pending(self) -> bool:
        return self._guard.is_pending

    @property
    def config(self) -> MachineConfig:
        return self._config

    @property
    def graph(self) -> StateGraph:
        """Read access to the declared state and transition records."""
        return self._graph

    @property
    def states(self) -> List[StateName]:
        """Target state names reachable from the current state, in transition order."""
        return [transition.to_state for transition in self._available_transitions()]

    @property
    def transitions(self) -> List[TransitionName]:
        """Names of transitions starting at the current state, in declaration order."""
        return [transition.name for transition in self._available_transitions()]

    @property
    def all_states(self) -> List[StateName]:
        return self._graph.state_names()

    @property
    def all_transitions(self) -> List[TransitionName]:
        return self._graph.transition_names()

    @property
    def dehydrated(self) -> HydratedState:
        """
        A deep copy of the current state name, its data and the transport.
        Each access returns a new, independent object.
        """
        return HydratedState.capture(self.state, self.data, self._transport)

    # -------------------------------------------------------------------------
    # Predicates
    # -------------------------------------------------------------------------

    def is_(self, state_name: Source[StateName]) -> Union[bool, "asyncio.Future[bool]"]:
        """
        Whether the machine is currently in ``state_name``.

        Returns a bool for a literal or producer, an awaitable bool for an awaitable.
        While another operation is in flight, returns an already-failed future
        carrying PendingStateError instead.
        """
        return self._guarded_query(state_name, lambda name: self._current_state.name == name)

    def can_transit_to(self, state_name: Source[StateName]) -> Union[bool, "asyncio.Future[bool]"]:
        """Whether a transition leads from the current state to ``state_name``."""
        return self._guarded_query(state_name, self._can_transit_to)

    def can_do_transition(self, transition_name: Source[TransitionName]) -> Union[bool, "asyncio.Future[bool]"]:
        """Whether a transition named ``transition_name`` starts at the current state."""
        return self._guarded_query(transition_name, self._can_do_transition)

    # -------------------------------------------------------------------------
    # Mutators
    # -------------------------------------------------------------------------

    def transit_to(self, state_name: Source[StateName], *args: Any, **kwargs: Any) -> "asyncio.Future[StateMachine]":
        """
        Move to the state named by ``state_name``, running the hook pipeline.

        Extra arguments are passed to every hook after the HookContext. Must be
        called with a running event loop; the returned task resolves to the
        machine itself, also when a hook vetoed the change.

        Failures (PendingStateError, AbsentStateError, UnavailableStateError,
        HookTimeoutError, or anything a hook raises) are delivered through the
        returned awaitable and leave the current state untouched.
        """
        return self._guard.run_async(lambda: self._checked_transit_to(state_name, args, kwargs))

    def do_transition(
        self, transition_name: Source[TransitionName], *args: Any, **kwargs: Any
    ) -> "asyncio.Future[StateMachine]":
        """
        Perform the transition named by ``transition_name`` from the current state.

        Behaves like :meth:`transit_to`, failing with AbsentTransitionError or
        UnavailableTransitionError instead of the state errors.
        """
        return self._guard.run_async(lambda: self._checked_do_transition(transition_name, args, kwargs))

    def hydrate(self, hydrated_state: Union[HydratedState, Mapping[str, Any]]) -> None:
        """
        Restore a snapshot produced by :attr:`dehydrated` (or its ``to_dict()``).

        Replaces the current state, overwrites that state's data and replaces the
        transport. No hooks run.

        :raises AbsentStateError: If the snapshot names an undeclared state.
        """
        snapshot = HydratedState.from_value(hydrated_state)
        state = self._graph.find_state(snapshot.state)
        if state is None:
            self._on_error(AbsentStateError(f'State with name "{snapshot.state}" does not exist.'))

        self._current_state = state
        state.data = snapshot.data
        self._transport = snapshot.transport
        logger.debug("Hydrated machine into state %r", state.name)

    # -------------------------------------------------------------------------
    # Hook registration
    # -------------------------------------------------------------------------

    def on_before_transition(self, hooks: Arrayable[Hook]) -> None:
        """Append one hook or a list of hooks to the before-each-transition phase."""
        self._before_each_transition.extend(as_hook_list(hooks))

    def on_after_transition(self, hooks: Arrayable[Hook]) -> None:
        """Append one hook or a list of hooks to the after-each-transition phase."""
        self._after_each_transition.extend(as_hook_list(hooks))

    def on_before_state(self, hooks: Arrayable[Hook]) -> None:
        """Append one hook or a list of hooks to the before-each-state phase."""
        self._before_each_state.extend(as_hook_list(hooks))

    def on_after_state(self, hooks: Arrayable[Hook]) -> None:
        """Append one hook or a list of hooks to the after-each-state phase."""
        self._after_each_state.extend(as_hook_list(hooks))

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _guarded_query(self, source: Source, predicate: Callable[[Any], bool]) -> Any:
        if classify_source(source) is SourceKind.DEFERRED:

            async def _query() -> bool:
                return predicate(await resolve_source(source))

            return self._guard.run_async(_query)
        return self._guard.run_sync(lambda: predicate(resolve_callable(source)))

    def _available_transitions(self) -> List[Transition]:
        return self._graph.transitions_from(self._current_state.name)

    def _can_transit_to(self, state_name: StateName) -> bool:
        return state_name in self.states

    def _can_do_transition(self, transition_name: TransitionName) -> bool:
        return transition_name in self.transitions

    async def _checked_transit_to(
        self, source: Source[StateName], args: Tuple[Any, ...], kwargs: Dict[str, Any]
    ) -> "StateMachine":
        state_name = await resolve_source(source)

        next_state = self._graph.find_state(state_name)
        if next_state is None:
            self._on_error(AbsentStateError(f'State with name "{state_name}" does not exist.'))

        transition = next((t for t in self._available_transitions() if t.to_state == state_name), None)
        if transition is None:
            available = ", ".join(str(name) for name in self.states)
            self._on_error(
                UnavailableStateError(
                    f"State machine can transit from {self.state} only to {available} but not to {state_name}."
                )
            )

        return await self._transit(transition, next_state, args, kwargs)

    async def _checked_do_transition(
        self, source: Source[TransitionName], args: Tuple[Any, ...], kwargs: Dict[str, Any]
    ) -> "StateMachine":
        transition_name = await resolve_source(source)

        if self._graph.find_transition(transition_name) is None:
            self._on_error(AbsentTransitionError(f'Transition with name "{transition_name}" does not exist.'))

        transition = next((t for t in self._available_transitions() if t.name == transition_name), None)
        if transition is None:
            available = ",".join(str(name) for name in self.transitions)
            self._on_error(
                UnavailableTransitionError(
                    f'State machine can do "{available}" transition(s) but not "{transition_name}".'
                )
            )

        return await self._transit(transition, self._graph.find_state(transition.to_state), args, kwargs)

    async def _transit(
        self,
        transition: Transition,
        next_state: State,
        args: Tuple[Any, ...],
        kwargs: Dict[str, Any],
    ) -> "StateMachine":
        """
        Run the eight hook phases around the pointer swap.

        A veto before the swap leaves the machine untouched; a veto or an
        exception after it restores the previous state first.
        """
        last_state = self._current_state
        context = HookContext(
            transition=transition,
            from_state=last_state,
            to_state=next_state,
            transport=self._transport,
            machine=self,
        )
        logger.debug("Transition %r: %r -> %r", transition.name, last_state.name, next_state.name)

        leaving = (
            (HookPhase.AFTER_EACH_STATE, self._after_each_state),
            (HookPhase.AFTER_STATE, last_state.after),
            (HookPhase.BEFORE_EACH_TRANSITION, self._before_each_transition),
            (HookPhase.BEFORE_TRANSITION, transition.before),
        )
        for phase, hooks in leaving:
            if not await self._hook_runner.run(phase, hooks, context, args, kwargs):
                return self

        self._current_state = next_state

        entering = (
            (HookPhase.AFTER_TRANSITION, transition.after),
            (HookPhase.AFTER_EACH_TRANSITION, self._after_each_transition),
            (HookPhase.BEFORE_STATE, next_state.before),
            (HookPhase.BEFORE_EACH_STATE, self._before_each_state),
        )
        try:
            for phase, hooks in entering:
                if not await self._hook_runner.run(phase, hooks, context, args, kwargs):
                    self._rollback(last_state)
                    return self
        except BaseException:
            self._rollback(last_state)
            raise

        logger.debug("Committed transition %r into %r", transition.name, next_state.name)
        return self

    def _rollback(self, state: State) -> None:
        logger.debug("Rolling back from %r to %r", self._current_state.name, state.name)
        self._current_state = state

    def _on_error(self, error: StateMachineError) -> NoReturn:
        """
        The single exit for every error the machine raises.

        A configured ``on_error`` handler sees the error first and may raise a
        different exception in its place.
        """
        logger.warning("%s: %s", error.code.value, error.message)
        handler = self._config.on_error
        if handler is not None:
            handler(error)
        raise error

    def __repr__(self) -> str:
        return f"StateMachine(state={self.state!r}, pending={self.is_pending})"
