# tfsm/core/graph.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""Validated storage of a machine's states and transitions."""

from __future__ import annotations

from typing import Iterable, List, Optional

from tfsm.core.states import State
from tfsm.core.transitions import Transition
from tfsm.interfaces.types import StateName, TransitionName


class StateGraph:
    """
    Owns the State and Transition records of exactly one machine, in
    declaration order. The lists are fixed after construction; only a
    state's ``data`` may later be replaced (by hydration).
    """

    def __init__(self, states: Iterable[State], transitions: Iterable[Transition]) -> None:
        self._states: List[State] = list(states)
        self._transitions: List[Transition] = list(transitions)

    @property
    def states(self) -> List[State]:
        """State records in declaration order. Returns a new list."""
        return list(self._states)

    @property
    def transitions(self) -> List[Transition]:
        """Transition records in declaration order. Returns a new list."""
        return list(self._transitions)

    def find_state(self, name: StateName) -> Optional[State]:
        for state in self._states:
            if state.name == name:
                return state
        return None

    def find_transition(self, name: TransitionName) -> Optional[Transition]:
        """First transition declared with ``name``, from any source state."""
        for transition in self._transitions:
            if transition.name == name:
                return transition
        return None

    def transitions_from(self, state_name: StateName) -> List[Transition]:
        """Transitions whose source is ``state_name``, in declaration order."""
        return [t for t in self._transitions if t.from_state == state_name]

    def state_names(self) -> List[StateName]:
        return [state.name for state in self._states]

    def transition_names(self) -> List[TransitionName]:
        return [transition.name for transition in self._transitions]
