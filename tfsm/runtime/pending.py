# tfsm/runtime/pending.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar, Union

from tfsm.core.errors import PendingStateError, StateMachineError

T = TypeVar("T")

logger = logging.getLogger(__name__)


class PendingGuard:
    """
    A single pending flag admitting at most one guarded operation at a time.

    This is a flag, not a queue: a request arriving while another one is in
    flight is rejected with PendingStateError and is never retried. The flag is
    cleared as soon as the admitted operation settles, whether it succeeded,
    failed or was cancelled.
    """

    def __init__(self, on_error: Callable[[StateMachineError], Any]) -> None:
        """
        :param on_error: The machine's error exit; expected to raise.
        """
        self._on_error = on_error
        self._owner: Optional[object] = None

    @property
    def is_pending(self) -> bool:
        return self._owner is not None

    def run_sync(self, func: Callable[..., T], *args: Any) -> Union[T, "asyncio.Future[T]"]:
        """
        Run a synchronous operation under the guard.

        :return: The operation's result, or, if pending, an already-failed
                 future carrying the PendingStateError (or whatever the error
                 exit raised instead).
        """
        if self.is_pending:
            return self._rejected()

        token = self._acquire()
        try:
            return func(*args)
        finally:
            self._release(token)

    def run_async(self, factory: Callable[[], Awaitable[T]]) -> "asyncio.Future[T]":
        """
        Schedule an asynchronous operation under the guard.

        The flag is taken synchronously, before this method returns, so a second
        call issued before the first one settles is rejected.

        :param factory: Called once, only if admitted, to create the awaitable.
        :return: A task for the operation, or an already-failed future carrying
                 the PendingStateError (or whatever the error exit raised instead).
        :raises RuntimeError: If no event loop is running.
        """
        loop = asyncio.get_running_loop()

        if self.is_pending:
            return self._rejected()

        token = self._acquire()
        try:
            task = loop.create_task(self._guarded(factory(), token))
        except BaseException:
            self._release(token)
            raise
        # Covers a task cancelled before its first step.
        task.add_done_callback(lambda _task: self._release(token))
        return task

    async def _guarded(self, awaitable: Awaitable[T], token: object) -> T:
        try:
            return await awaitable
        finally:
            self._release(token)

    def _acquire(self) -> object:
        token = object()
        self._owner = token
        return token

    def _release(self, token: object) -> None:
        if self._owner is token:
            self._owner = None

    def _rejected(self) -> "asyncio.Future[Any]":
        error = self._pending_error()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Only a producer re-entering the machine outside any loop gets here.
            raise error from None
        future = loop.create_future()
        future.set_exception(error)
        return future

    def _pending_error(self) -> Exception:
        logger.debug("Rejecting operation: another one is in flight")
        error = PendingStateError("State machine in pending state.")
        try:
            self._on_error(error)
        except Exception as raised:
            return raised
        return error
