"""Trailing-edge debounce for async functions."""

import asyncio
import functools
from collections.abc import Awaitable, Callable
from typing import Any

from bounded_tasks.config.domain.defaults import DEFAULT_DEBOUNCE_DELAY_SECONDS
from bounded_tasks.core.futures import forward_outcome


def debounce_async[**P, R](
    fn: Callable[P, Awaitable[R]],
    delay_seconds: float = DEFAULT_DEBOUNCE_DELAY_SECONDS,
) -> Callable[P, Awaitable[R]]:
    """Wrap ``fn`` so that a burst of calls results in a single invocation.

    Every call restarts the ``delay_seconds`` timer. When the timer finally
    fires, ``fn`` runs once with the arguments of the most recent call and
    every caller from that burst receives its result (or its error).
    """
    timer: asyncio.TimerHandle | None = None
    waiter: asyncio.Future[R] | None = None

    def fire(args: tuple[Any, ...], kwargs: dict[str, Any], target: asyncio.Future[R]) -> None:
        nonlocal timer, waiter
        timer = None
        waiter = None
        invocation = asyncio.ensure_future(fn(*args, **kwargs))
        invocation.add_done_callback(functools.partial(forward_outcome, target=target))

    @functools.wraps(fn)
    async def debounced(*args: P.args, **kwargs: P.kwargs) -> R:
        nonlocal timer, waiter
        loop = asyncio.get_running_loop()
        if timer is not None:
            timer.cancel()
        if waiter is None:
            waiter = loop.create_future()
        target = waiter
        timer = loop.call_later(delay_seconds, fire, args, kwargs, target)
        # Shielded so one cancelled caller does not cancel the shared result.
        return await asyncio.shield(target)

    return debounced
