"""Cancellable — a handle whose waiters can be released without stopping the work."""

import asyncio
from collections.abc import Awaitable

from bounded_tasks.core.futures import abandon
from bounded_tasks.core.errors import OperationCancelledError


class Cancellable[R]:
    """Wraps an awaitable so that waiting on it can be abandoned.

    ``cancel()`` releases every current and future waiter with
    OperationCancelledError. The wrapped operation itself keeps running; its
    outcome is discarded.
    """

    def __init__(self, operation: Awaitable[R]) -> None:
        self._operation = asyncio.ensure_future(operation)
        self._cancel_requested = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._cancel_requested.is_set()

    def cancel(self) -> None:
        if self.cancelled:
            return
        self._cancel_requested.set()
        abandon(self._operation)

    async def wait(self) -> R:
        """Wait for the operation, or raise OperationCancelledError once cancelled."""
        if self.cancelled:
            raise OperationCancelledError()

        cancel_waiter = asyncio.ensure_future(self._cancel_requested.wait())
        try:
            await asyncio.wait(
                {self._operation, cancel_waiter},
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            cancel_waiter.cancel()

        if self.cancelled:
            raise OperationCancelledError()
        return self._operation.result()


def cancellable[R](operation: Awaitable[R]) -> Cancellable[R]:
    return Cancellable(operation)
