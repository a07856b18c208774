# tfsm/interfaces/types.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import Any, Awaitable, Callable, Dict, Hashable, List, TypeVar, Union

T = TypeVar("T")

StateName = Hashable
TransitionName = Hashable

# A hook may return False (veto), anything else, or an awaitable of either.
HookResult = Union[bool, None, Awaitable[Union[bool, None]]]
Hook = Callable[..., HookResult]
Arrayable = Union[T, List[T]]

# Literal value, zero-argument producer, or awaitable.
Source = Union[T, Callable[[], T], Awaitable[T]]

Transport = Dict[Any, Any]
