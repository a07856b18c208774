# tfsm/core/snapshot.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Union

from tfsm.interfaces.types import StateName


@dataclass
class HydratedState:
    """
    A detached copy of a machine's externally visible state: the current state
    name, that state's data and the transport. Holds no reference into the
    machine that produced it, so either side can be mutated freely.
    """

    state: StateName
    data: Any = None
    transport: Dict[Any, Any] = field(default_factory=dict)

    @classmethod
    def capture(cls, state: StateName, data: Any, transport: Mapping[Any, Any]) -> "HydratedState":
        return cls(state=state, data=copy.deepcopy(data), transport=copy.deepcopy(dict(transport)))

    @classmethod
    def from_value(cls, value: Union["HydratedState", Mapping[str, Any]]) -> "HydratedState":
        """Accept a HydratedState or a mapping such as one produced by :meth:`to_dict`."""
        if isinstance(value, HydratedState):
            return cls.capture(value.state, value.data, value.transport)
        if isinstance(value, Mapping):
            return cls.from_dict(value)
        raise TypeError(f"Cannot hydrate from {type(value).__name__}")

    @classmethod
    def from_dict(cls, value: Mapping[str, Any]) -> "HydratedState":
        return cls.capture(value.get("state"), value.get("data"), value.get("transport") or {})

    def to_dict(self) -> Dict[str, Any]:
        """A deep-copied plain dict, suitable for json.dumps when the payload is."""
        return {
            "state": self.state,
            "data": copy.deepcopy(self.data),
            "transport": copy.deepcopy(self.transport),
        }
