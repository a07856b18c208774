# tfsm/config.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional, Union

if TYPE_CHECKING:
    from tfsm.core.errors import StateMachineError

ErrorHandler = Callable[["StateMachineError"], Any]


@dataclass(frozen=True)
class MachineConfig:
    """
    Per-machine options.

    :param on_error: Called with every error before it is raised. It may raise a
                     different exception, which then propagates instead; it
                     cannot suppress the error.
    :param timeout: Seconds each hook may take to settle. None waits forever.
    """

    on_error: Optional[ErrorHandler] = None
    timeout: Optional[float] = None

    def __post_init__(self) -> None:
        if self.on_error is not None and not callable(self.on_error):
            raise ValueError("on_error must be callable")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

    @classmethod
    def from_value(cls, value: Union["MachineConfig", Mapping[str, Any], None]) -> "MachineConfig":
        if value is None:
            return cls()
        if isinstance(value, MachineConfig):
            return value
        if isinstance(value, Mapping):
            unknown = set(value) - {"on_error", "timeout"}
            if unknown:
                raise ValueError(f"Unknown config options: {sorted(unknown)}")
            return cls(on_error=value.get("on_error"), timeout=value.get("timeout"))
        raise TypeError(f"Cannot build a MachineConfig from {type(value).__name__}")
