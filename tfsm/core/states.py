# tfsm/core/states.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Union

from tfsm.core.hooks import as_hook_list
from tfsm.interfaces.types import Hook, StateName


@dataclass(eq=False)
class State:
    """
    A named condition the machine can occupy. Holds opaque payload data and the
    hooks that run when this state is left (``after``) or entered (``before``).

    States compare by identity: the machine's current-state pointer is a
    reference into its own state list, never a copy.
    """

    name: StateName
    data: Any = None
    before: List[Hook] = field(default_factory=list)
    after: List[Hook] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.before = as_hook_list(self.before)
        self.after = as_hook_list(self.after)

    @classmethod
    def from_value(cls, value: Union["State", Mapping[str, Any]]) -> "State":
        """
        Normalize a declaration into a State owned by a single machine.

        :param value: A State or a mapping with ``name`` and optional ``data``,
                      ``before`` and ``after`` keys.
        :return: A fresh State; hook lists are copied so machines never share them.
        """
        if isinstance(value, State):
            return cls(name=value.name, data=value.data, before=list(value.before), after=list(value.after))
        if isinstance(value, Mapping):
            return cls(
                name=value["name"],
                data=value.get("data"),
                before=value.get("before"),
                after=value.get("after"),
            )
        raise TypeError(f"Cannot build a State from {type(value).__name__}")

    def __repr__(self) -> str:
        return f"State(name={self.name!r}, before={len(self.before)}, after={len(self.after)})"
