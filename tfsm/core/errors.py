# tfsm/core/errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Machine-readable codes carried by every StateMachineError."""

    PENDING_STATE = "PENDING_STATE"

    ABSENT_STATE = "ABSENT_STATE"
    UNAVAILABLE_STATE = "UNAVAILABLE_STATE"
    DUPLICATED_STATE = "DUPLICATED_STATE"

    ABSENT_TRANSITION = "ABSENT_TRANSITION"
    UNAVAILABLE_TRANSITION = "UNAVAILABLE_TRANSITION"
    DUPLICATED_TRANSITION = "DUPLICATED_TRANSITION"

    ABSENT_PROPERTY = "ABSENT_PROPERTY"

    TIMEOUT = "TIMEOUT"


class StateMachineError(Exception):
    """
    Base exception class for errors within the state machine library.
    """

    code: Optional[ErrorCode] = None

    def __init__(self, message: str, code: Optional[ErrorCode] = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def __repr__(self) -> str:
        code = getattr(self.code, "value", self.code)
        return f"{type(self).__name__}({self.message!r}, code={code})"


class PendingStateError(StateMachineError):
    """
    Raised when a guarded operation is requested while another one is in flight.
    """

    code = ErrorCode.PENDING_STATE


class AbsentStateError(StateMachineError):
    """
    Raised when a referenced state is not declared in the machine.
    """

    code = ErrorCode.ABSENT_STATE


class UnavailableStateError(StateMachineError):
    """
    Raised when the target state is not reachable from the current state.
    """

    code = ErrorCode.UNAVAILABLE_STATE


class DuplicatedStateError(StateMachineError):
    """
    Raised when two declared states share a name.
    """

    code = ErrorCode.DUPLICATED_STATE


class AbsentTransitionError(StateMachineError):
    """
    Raised when no declared transition has the requested name.
    """

    code = ErrorCode.ABSENT_TRANSITION


class UnavailableTransitionError(StateMachineError):
    """
    Raised when the requested transition does not start at the current state.
    """

    code = ErrorCode.UNAVAILABLE_TRANSITION


class DuplicatedTransitionError(StateMachineError):
    """
    Raised when two transitions share both their name and their source state.
    """

    code = ErrorCode.DUPLICATED_TRANSITION


class AbsentPropertyError(StateMachineError):
    """
    Raised by the class adapter when state data names a field the host lacks.
    """

    code = ErrorCode.ABSENT_PROPERTY


class HookTimeoutError(StateMachineError):
    """
    Raised when a hook does not settle within the configured timeout.
    """

    code = ErrorCode.TIMEOUT
