"""Future helpers: abandoning work without cancelling it, and forwarding outcomes."""

import asyncio
from typing import Any

# asyncio keeps only weak references to tasks; hold abandoned ones until they settle.
_abandoned: set[asyncio.Future[Any]] = set()


def abandon(future: asyncio.Future[Any]) -> None:
    """Let ``future`` run to completion unobserved.

    Its eventual result or exception is discarded so that an abandoned failure
    never surfaces as an "exception was never retrieved" warning.
    """
    if future.done():
        _discard_outcome(future)
        return
    _abandoned.add(future)
    future.add_done_callback(_discard_outcome)


def abandoned_count() -> int:
    """Number of abandoned futures that are still running."""
    return len(_abandoned)


def _discard_outcome(future: asyncio.Future[Any]) -> None:
    _abandoned.discard(future)
    if not future.cancelled():
        future.exception()


def forward_outcome(source: asyncio.Future[Any], target: asyncio.Future[Any]) -> None:
    """Copy the settled outcome of ``source`` onto ``target`` unless target already settled."""
    if target.done():
        if not source.cancelled():
            source.exception()
        return
    if source.cancelled():
        target.cancel()
    elif source.exception() is not None:
        target.set_exception(source.exception())  # type: ignore[arg-type]
    else:
        target.set_result(source.result())


def cancel_requested() -> bool:
    """True when the running task itself has been asked to cancel.

    A CancelledError raised while this is False came from an awaited inner
    future, not from a ``cancel()`` aimed at the caller.
    """
    task = asyncio.current_task()
    return task is not None and task.cancelling() > 0
