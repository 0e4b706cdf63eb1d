"""Deadline wrappers: race awaitables against a timer without cancelling them."""

import asyncio
from collections.abc import Awaitable, Iterable

from bounded_tasks.core.futures import abandon
from bounded_tasks.core.clock import sleep
from bounded_tasks.core.errors import TimeoutExceededError


async def with_timeout[R](
    operation: Awaitable[R],
    timeout_seconds: float,
    message: str | None = None,
    cancel_on_timeout: bool = False,
) -> R:
    """Await ``operation`` for at most ``timeout_seconds``.

    Unlike ``asyncio.wait_for``, the operation is NOT cancelled when the deadline
    passes: it keeps running in the background and whatever it eventually
    produces is discarded. Any resource it holds stays open until it finishes
    on its own. Pass ``cancel_on_timeout=True`` to request cancellation instead.

    Raises:
        TimeoutExceededError: if the deadline elapses first.
    """
    future = asyncio.ensure_future(operation)
    try:
        done, _ = await asyncio.wait({future}, timeout=timeout_seconds)
    except asyncio.CancelledError:
        abandon(future)
        raise

    if future in done:
        return future.result()

    if cancel_on_timeout:
        future.cancel()
    abandon(future)
    raise TimeoutExceededError(timeout_seconds=timeout_seconds, message=message)


async def race_with_timeout[R](
    operations: Iterable[Awaitable[R]], timeout_seconds: float
) -> R:
    """Return the outcome of whichever operation settles first.

    A failure wins the race just like a success does. When several settle in
    the same loop iteration the earliest one in input order wins. Losers are
    abandoned, not cancelled.

    Raises:
        TimeoutExceededError: if nothing settles before the deadline.
    """
    futures = [asyncio.ensure_future(op) for op in operations]
    message = f"Failed to complete race: timed out after {timeout_seconds}s"

    if not futures:
        await sleep(timeout_seconds)
        raise TimeoutExceededError(timeout_seconds=timeout_seconds, message=message)

    try:
        done, _ = await asyncio.wait(
            futures, timeout=timeout_seconds, return_when=asyncio.FIRST_COMPLETED
        )
    except asyncio.CancelledError:
        for future in futures:
            abandon(future)
        raise

    winner = next((f for f in futures if f in done), None)
    for future in futures:
        if future is not winner:
            abandon(future)

    if winner is None:
        raise TimeoutExceededError(timeout_seconds=timeout_seconds, message=message)
    return winner.result()
