# tfsm/builder.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from typing import Any, Dict, List, Optional

from tfsm.config import ErrorHandler, MachineConfig
from tfsm.core.hooks import as_hook_list
from tfsm.core.state_machine import StateMachine
from tfsm.core.states import State
from tfsm.core.transitions import Transition
from tfsm.interfaces.types import Arrayable, Hook, StateName, TransitionName


class MachineBuilder:
    """Builds state machine construction input step by step.

    Every mutating method returns the builder so calls can be chained. Nothing
    is validated until :meth:`build`, which hands the collected declarations
    to the machine constructor.

    Example:
        machine = (
            MachineBuilder()
            .initial("SOLID")
            .state("SOLID", data=-100)
            .state("LIQUID", data=50)
            .transition("MELT", "SOLID", "LIQUID")
            .build()
        )
    """

    def __init__(self):
        """Initialize an empty builder."""
        self._initial: Optional[StateName] = None
        self._has_initial = False
        self._states: List[State] = []
        self._transitions: List[Transition] = []
        self._hooks: Dict[str, List[Hook]] = {
            "before_each_state": [],
            "after_each_state": [],
            "before_each_transition": [],
            "after_each_transition": [],
        }
        self._config: Dict[str, Any] = {}

    @property
    def states(self) -> List[State]:
        """Declared states, in declaration order."""
        return list(self._states)

    @property
    def transitions(self) -> List[Transition]:
        """Declared transitions, in declaration order."""
        return list(self._transitions)

    def initial(self, name: StateName) -> "MachineBuilder":
        """Set the name of the state the machine starts in."""
        self._initial = name
        self._has_initial = True
        return self

    def state(
        self,
        name: StateName,
        data: Any = None,
        before: Optional[Arrayable[Hook]] = None,
        after: Optional[Arrayable[Hook]] = None,
    ) -> "MachineBuilder":
        """Declare a state.

        Args:
            name: State name, unique within the machine
            data: Opaque payload exposed as ``machine.data`` while in this state
            before: Hooks run when the machine enters this state
            after: Hooks run when the machine leaves this state
        """
        self._states.append(State(name=name, data=data, before=before, after=after))
        return self

    def transition(
        self,
        name: TransitionName,
        from_state: StateName,
        to_state: StateName,
        before: Optional[Arrayable[Hook]] = None,
        after: Optional[Arrayable[Hook]] = None,
    ) -> "MachineBuilder":
        """Declare a transition.

        Args:
            name: Transition name, unique per source state
            from_state: Name of the source state
            to_state: Name of the target state
            before: Hooks run before the current state changes
            after: Hooks run after the current state changed
        """
        self._transitions.append(
            Transition(name=name, from_state=from_state, to_state=to_state, before=before, after=after)
        )
        return self

    def before_each_state(self, hooks: Arrayable[Hook]) -> "MachineBuilder":
        return self._add_hooks("before_each_state", hooks)

    def after_each_state(self, hooks: Arrayable[Hook]) -> "MachineBuilder":
        return self._add_hooks("after_each_state", hooks)

    def before_each_transition(self, hooks: Arrayable[Hook]) -> "MachineBuilder":
        return self._add_hooks("before_each_transition", hooks)

    def after_each_transition(self, hooks: Arrayable[Hook]) -> "MachineBuilder":
        return self._add_hooks("after_each_transition", hooks)

    def config(self, on_error: Optional[ErrorHandler] = None, timeout: Optional[float] = None) -> "MachineBuilder":
        """Set machine options; see :class:`tfsm.config.MachineConfig`."""
        self._config = {"on_error": on_error, "timeout": timeout}
        return self

    def build(self) -> StateMachine:
        """Build and validate a machine instance.

        Returns:
            The constructed state machine

        Raises:
            ValueError: If no initial state was set
            StateMachineError: If the declarations fail validation
        """
        if not self._has_initial:
            raise ValueError("Initial state not set")

        states = {
            "states": [State.from_value(state) for state in self._states],
            "before": list(self._hooks["before_each_state"]),
            "after": list(self._hooks["after_each_state"]),
        }
        transitions = {
            "transitions": [Transition.from_value(transition) for transition in self._transitions],
            "before": list(self._hooks["before_each_transition"]),
            "after": list(self._hooks["after_each_transition"]),
        }
        return StateMachine(self._initial, states, transitions, MachineConfig(**self._config))

    def _add_hooks(self, kind: str, hooks: Arrayable[Hook]) -> "MachineBuilder":
        self._hooks[kind].extend(as_hook_list(hooks))
        return self
