# tfsm/adapter.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
Declarative adapter: host classes declare their states and transitions as
class attributes and get a StateMachine assembled at instantiation time.

Example:
    class Water(StateMachineAdapter):
        __initial_state__ = "SOLID"

        temperature = None

        solid = StateField("SOLID", data={"temperature": -100})
        liquid = StateField("LIQUID", data={"temperature": 50})
        melt = TransitionField("MELT", "SOLID", "LIQUID")

    water = Water()
    water.temperature  # -100
    await water.transit_to("LIQUID")
    water.temperature  # 50
"""

from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any, Awaitable, Dict, List, Mapping, Optional, Tuple, Union

from tfsm.builder import MachineBuilder
from tfsm.config import MachineConfig
from tfsm.core.errors import AbsentPropertyError
from tfsm.core.snapshot import HydratedState
from tfsm.core.state_machine import StateMachine
from tfsm.interfaces.types import Arrayable, Hook, Source, StateName, TransitionName, Transport

logger = logging.getLogger(__name__)


class StateField:
    """
    Declares a state. On each host instance the attribute holding the field is
    replaced by a per-instance copy of the state's data, which the engine then
    shares with the host.
    """

    def __init__(
        self,
        name: StateName,
        data: Any = None,
        before: Optional[Arrayable[Hook]] = None,
        after: Optional[Arrayable[Hook]] = None,
    ) -> None:
        self.name = name
        self.data = data
        self.before = before
        self.after = after

    def __repr__(self) -> str:
        return f"StateField({self.name!r})"


class TransitionField:
    """Declares a transition between two declared states."""

    def __init__(
        self,
        name: TransitionName,
        from_state: StateName,
        to_state: StateName,
        before: Optional[Arrayable[Hook]] = None,
        after: Optional[Arrayable[Hook]] = None,
    ) -> None:
        self.name = name
        self.from_state = from_state
        self.to_state = to_state
        self.before = before
        self.after = after

    def __repr__(self) -> str:
        return f"TransitionField({self.name!r}, {self.from_state!r} -> {self.to_state!r})"


def _collect_fields(owner: type) -> Tuple[Dict[str, StateField], Dict[str, TransitionField]]:
    """Declared fields in definition order, base classes first; subclasses override by attribute name."""
    states: Dict[str, StateField] = {}
    transitions: Dict[str, TransitionField] = {}
    for klass in reversed(owner.__mro__):
        for attribute, value in vars(klass).items():
            if isinstance(value, StateField):
                states[attribute] = value
            elif isinstance(value, TransitionField):
                transitions[attribute] = value
    return states, transitions


class StateMachineAdapter:
    """
    Base class for hosts declaring a machine through StateField and
    TransitionField attributes.

    ``__initial_state__`` names the starting state; ``__machine_config__`` may
    hold a MachineConfig or mapping. Subclasses defining ``__init__`` must call
    ``super().__init__()`` once the attributes mirrored from state data exist.

    After construction, and after every successful transition, each key of the
    current state's data mapping is copied onto the host attribute of the same
    name. A key without a matching attribute raises AbsentPropertyError.
    """

    __initial_state__: Optional[StateName] = None
    __machine_config__: Union[MachineConfig, Mapping[str, Any], None] = None

    def __init__(self) -> None:
        state_fields, transition_fields = _collect_fields(type(self))
        if self.__initial_state__ is None:
            raise ValueError(f"{type(self).__name__} must define __initial_state__")

        builder = MachineBuilder().initial(self.__initial_state__)
        for attribute, field in state_fields.items():
            setattr(self, attribute, copy.deepcopy(field.data))
            builder.state(field.name, data=getattr(self, attribute), before=field.before, after=field.after)
        for field in transition_fields.values():
            builder.transition(field.name, field.from_state, field.to_state, before=field.before, after=field.after)

        config = MachineConfig.from_value(self.__machine_config__)
        builder.config(on_error=config.on_error, timeout=config.timeout)

        self._machine = builder.build()
        self._sync_properties()

    @property
    def machine(self) -> StateMachine:
        """The engine backing this host."""
        return self._machine

    # Queries

    @property
    def is_pending(self) -> bool:
        return self._machine.is_pending

    @property
    def state(self) -> StateName:
        return self._machine.state

    @property
    def states(self) -> List[StateName]:
        return self._machine.states

    @property
    def all_states(self) -> List[StateName]:
        return self._machine.all_states

    @property
    def transitions(self) -> List[TransitionName]:
        return self._machine.transitions

    @property
    def all_transitions(self) -> List[TransitionName]:
        return self._machine.all_transitions

    @property
    def data(self) -> Any:
        return self._machine.data

    @property
    def transport(self) -> Transport:
        return self._machine.transport

    @property
    def dehydrated(self) -> HydratedState:
        return self._machine.dehydrated

    # Predicates

    def is_(self, state_name: Source[StateName]) -> Any:
        return self._machine.is_(state_name)

    def can_transit_to(self, state_name: Source[StateName]) -> Any:
        return self._machine.can_transit_to(state_name)

    def can_do_transition(self, transition_name: Source[TransitionName]) -> Any:
        return self._machine.can_do_transition(transition_name)

    # Mutators

    def transit_to(self, state_name: Source[StateName], *args: Any, **kwargs: Any) -> "asyncio.Future[Any]":
        """Forward to the engine, then mirror the new state's data onto this host."""
        return asyncio.ensure_future(self._mirrored(self._machine.transit_to(state_name, *args, **kwargs)))

    def do_transition(
        self, transition_name: Source[TransitionName], *args: Any, **kwargs: Any
    ) -> "asyncio.Future[Any]":
        """Forward to the engine, then mirror the new state's data onto this host."""
        return asyncio.ensure_future(self._mirrored(self._machine.do_transition(transition_name, *args, **kwargs)))

    def hydrate(self, hydrated_state: Union[HydratedState, Mapping[str, Any]]) -> None:
        self._machine.hydrate(hydrated_state)
        self._sync_properties()

    # Hook registration

    def on_before_transition(self, hooks: Arrayable[Hook]) -> None:
        self._machine.on_before_transition(hooks)

    def on_after_transition(self, hooks: Arrayable[Hook]) -> None:
        self._machine.on_after_transition(hooks)

    def on_before_state(self, hooks: Arrayable[Hook]) -> None:
        self._machine.on_before_state(hooks)

    def on_after_state(self, hooks: Arrayable[Hook]) -> None:
        self._machine.on_after_state(hooks)

    async def _mirrored(self, operation: Awaitable[Any]) -> "StateMachineAdapter":
        await operation
        self._sync_properties()
        return self

    def _sync_properties(self) -> None:
        data = self._machine.data
        if not isinstance(data, Mapping):
            return
        for key, value in data.items():
            if not hasattr(self, key):
                raise AbsentPropertyError(f'Class {type(self).__name__} doesn\'t have property "{key}"')
            setattr(self, key, value)
        logger.debug("Mirrored %d field(s) of state %r onto %s", len(data), self.state, type(self).__name__)
