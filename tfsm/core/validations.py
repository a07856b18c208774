# tfsm/core/validations.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import Callable, List, Optional, Sequence

from tfsm.core.errors import AbsentStateError, DuplicatedStateError, DuplicatedTransitionError, StateMachineError
from tfsm.core.states import State
from tfsm.core.transitions import Transition

ErrorExit = Callable[[StateMachineError], None]


def _raise(error: StateMachineError) -> None:
    raise error


class Validator:
    """
    Performs construction-time validation of a machine's graph: state names
    are unique, transitions reference declared states, and no two transitions
    share both a name and a source state.

    Every failure is handed to ``on_error``, which is expected to raise.
    """

    def __init__(self, on_error: Optional[ErrorExit] = None) -> None:
        self._on_error = on_error or _raise

    def validate(self, states: Sequence[State], transitions: Sequence[Transition]) -> None:
        """
        Check states first, then transitions, stopping at the first violation.

        :raises DuplicatedStateError: Two states share a name.
        :raises AbsentStateError: A transition starts or ends at an undeclared state.
        :raises DuplicatedTransitionError: Two transitions share ``(from_state, name)``.
        """
        self.validate_states(states)
        self.validate_transitions(states, transitions)

    def validate_states(self, states: Sequence[State]) -> None:
        seen: List = []
        for state in states:
            if state.name in seen:
                self._on_error(DuplicatedStateError(f'There are duplicated states "{state.name}".'))
            seen.append(state.name)

    def validate_transitions(self, states: Sequence[State], transitions: Sequence[Transition]) -> None:
        names = [state.name for state in states]
        seen: List = []
        for transition in transitions:
            if transition.from_state not in names:
                self._on_error(
                    AbsentStateError(
                        f'There is no state "{transition.from_state}" from which '
                        f'the transition "{transition.name}" begins.'
                    )
                )
            if transition.to_state not in names:
                self._on_error(
                    AbsentStateError(
                        f'There is no state "{transition.to_state}" in which '
                        f'the transition "{transition.name}" leads.'
                    )
                )

            key = (transition.from_state, transition.name)
            if key in seen:
                self._on_error(
                    DuplicatedTransitionError(
                        f'There are duplicated transitions "{transition.name}" '
                        f'from "{transition.from_state}" state.'
                    )
                )
            seen.append(key)
