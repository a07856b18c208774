# tfsm/core/transitions.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Union

from tfsm.core.hooks import as_hook_list
from tfsm.interfaces.types import Hook, StateName, TransitionName


@dataclass(eq=False)
class Transition:
    """
    A named, directed edge between two states. Its ``before`` hooks run while
    the machine is still in ``from_state``; its ``after`` hooks run once the
    current-state pointer already designates ``to_state``.
    """

    name: TransitionName
    from_state: StateName
    to_state: StateName
    before: List[Hook] = field(default_factory=list)
    after: List[Hook] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.before = as_hook_list(self.before)
        self.after = as_hook_list(self.after)

    @classmethod
    def from_value(cls, value: Union["Transition", Mapping[str, Any]]) -> "Transition":
        """
        Normalize a declaration into a Transition.

        Mappings may use either ``from``/``to`` or ``from_state``/``to_state``.
        """
        if isinstance(value, Transition):
            return cls(
                name=value.name,
                from_state=value.from_state,
                to_state=value.to_state,
                before=list(value.before),
                after=list(value.after),
            )
        if isinstance(value, Mapping):
            return cls(
                name=value["name"],
                from_state=value["from_state"] if "from_state" in value else value["from"],
                to_state=value["to_state"] if "to_state" in value else value["to"],
                before=value.get("before"),
                after=value.get("after"),
            )
        raise TypeError(f"Cannot build a Transition from {type(value).__name__}")

    def __repr__(self) -> str:
        return f"Transition(name={self.name!r}, from_state={self.from_state!r}, to_state={self.to_state!r})"
