# tfsm/runtime/timers.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Optional, TypeVar

import async_timeout

T = TypeVar("T")


async def wait_with_timeout(
    awaitable: Awaitable[T],
    timeout: Optional[float],
    on_expired: Optional[Callable[[], Any]] = None,
) -> Any:
    """
    Await ``awaitable``, racing it against a timer when ``timeout`` is set.

    Without a timeout the awaitable is awaited for as long as it takes; an
    awaitable that never settles suspends the caller forever.

    :param awaitable: The value to wait for.
    :param timeout: Seconds before giving up, or None to wait indefinitely.
    :param on_expired: Called when the timer fired; its result is returned.
                       Only consulted for this timer's own expiry, never for a
                       TimeoutError raised by the awaited operation itself.
    :raises asyncio.TimeoutError: If the timer fires first and no ``on_expired``
                                  is given. The awaited operation is cancelled.
    """
    if timeout is None:
        return await awaitable

    timer = async_timeout.timeout(timeout)
    try:
        async with timer:
            return await awaitable
    except asyncio.TimeoutError:
        if not timer.expired or on_expired is None:
            raise
        return on_expired()
