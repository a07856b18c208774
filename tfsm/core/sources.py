# tfsm/core/sources.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import inspect
from enum import Enum, auto
from typing import Any

from tfsm.interfaces.types import Source


class SourceKind(Enum):
    """The three shapes a transition target may be supplied in."""

    LITERAL = auto()
    PRODUCER = auto()
    DEFERRED = auto()


def classify_source(source: Any) -> SourceKind:
    """Tell apart an awaitable, a zero-argument producer and a plain value."""
    if inspect.isawaitable(source):
        return SourceKind.DEFERRED
    if callable(source):
        return SourceKind.PRODUCER
    return SourceKind.LITERAL


def resolve_callable(source: Source) -> Any:
    """
    Reduce a literal or a producer to its value without suspending.

    Only valid for non-awaitable sources; the producer's result is returned as is.
    """
    if classify_source(source) is SourceKind.PRODUCER:
        return source()
    return source


async def resolve_source(source: Source) -> Any:
    """
    Reduce any source to the value it designates.

    Awaitables are awaited, producers are called (and their result awaited
    if it is itself awaitable), literals are returned unchanged.
    """
    kind = classify_source(source)
    if kind is SourceKind.DEFERRED:
        return await source
    value = resolve_callable(source)
    if inspect.isawaitable(value):
        return await value
    return value
