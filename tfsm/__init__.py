"""tfsm: an embeddable finite state machine with cancelable lifecycle hooks

One StateMachine instance tracks a single current state over a fixed set of
named states and named transitions. Every state change runs an ordered
pipeline of eight hook phases; any hook may veto the change, and the machine
never commits a vetoed change nor runs two transitions at once.

Responsibilities:
    - Graph validation at construction
    - Legality queries and predicates
    - Asynchronous hook pipeline with veto, rollback and per-hook timeout
    - Snapshot (dehydrate) and restore (hydrate)

Interactions:
    - Client code through StateMachine, MachineBuilder or StateMachineAdapter
    - asyncio for every state-changing operation
    - Logging system for diagnostics (the library never configures handlers)
"""

from tfsm.adapter import StateField, StateMachineAdapter, TransitionField
from tfsm.builder import MachineBuilder
from tfsm.config import MachineConfig
from tfsm.core import (
    AbsentPropertyError,
    AbsentStateError,
    AbsentTransitionError,
    DuplicatedStateError,
    DuplicatedTransitionError,
    ErrorCode,
    HookContext,
    HookPhase,
    HookTimeoutError,
    HydratedState,
    PendingStateError,
    State,
    StateMachine,
    StateMachineError,
    Transition,
    UnavailableStateError,
    UnavailableTransitionError,
)

__version__ = "0.1.0"

__all__ = [
    "StateMachine",
    "State",
    "Transition",
    "HookContext",
    "HookPhase",
    "HydratedState",
    "MachineConfig",
    "MachineBuilder",
    "StateMachineAdapter",
    "StateField",
    "TransitionField",
    # Errors
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
]
