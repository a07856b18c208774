"""
Core package providing the state machine engine.

Architecture:
- Graph store and construction-time validation
- Source resolution for literal, producer and awaitable targets
- Eight-phase hook pipeline with veto and rollback
- Snapshot and restore of the externally visible state
"""

# Import order matters to avoid circular dependencies
from .errors import (
    AbsentPropertyError,
    AbsentStateError,
    AbsentTransitionError,
    DuplicatedStateError,
    DuplicatedTransitionError,
    ErrorCode,
    HookTimeoutError,
    PendingStateError,
    StateMachineError,
    UnavailableStateError,
    UnavailableTransitionError,
)
from .hooks import HookContext, HookPhase
from .states import State
from .transitions import Transition
from .snapshot import HydratedState
from .state_machine import StateMachine

__all__ = [
    "ErrorCode",
    "StateMachineError",
    "PendingStateError",
    "AbsentStateError",
    "UnavailableStateError",
    "DuplicatedStateError",
    "AbsentTransitionError",
    "UnavailableTransitionError",
    "DuplicatedTransitionError",
    "AbsentPropertyError",
    "HookTimeoutError",
    "HookContext",
    "HookPhase",
    "State",
    "Transition",
    "HydratedState",
    "StateMachine",
]
