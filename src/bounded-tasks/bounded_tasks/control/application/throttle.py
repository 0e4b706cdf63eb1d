"""Leading-edge throttle for async functions."""

import asyncio
import functools
import math
from collections.abc import Awaitable, Callable
from typing import Any

from bounded_tasks.config.domain.defaults import DEFAULT_THROTTLE_INTERVAL_SECONDS
from bounded_tasks.core.futures import forward_outcome


def throttle_async[**P, R](
    fn: Callable[P, Awaitable[R]],
    interval_seconds: float = DEFAULT_THROTTLE_INTERVAL_SECONDS,
) -> Callable[P, Awaitable[R]]:
    """Wrap ``fn`` so that it starts at most once per ``interval_seconds``.

    A call made after the interval has elapsed runs immediately. A call made
    inside the interval schedules one deferred invocation for the end of the
    interval; every further call until that invocation finishes shares its
    result.
    """
    last_execution = -math.inf
    pending: asyncio.Future[R] | None = None

    def settle(invocation: asyncio.Future[R], target: asyncio.Future[R]) -> None:
        nonlocal pending
        if pending is target:
            pending = None
        forward_outcome(invocation, target)

    def fire(args: tuple[Any, ...], kwargs: dict[str, Any], target: asyncio.Future[R]) -> None:
        nonlocal last_execution
        last_execution = asyncio.get_running_loop().time()
        invocation = asyncio.ensure_future(fn(*args, **kwargs))
        invocation.add_done_callback(functools.partial(settle, target=target))

    @functools.wraps(fn)
    async def throttled(*args: P.args, **kwargs: P.kwargs) -> R:
        nonlocal last_execution, pending
        if pending is not None:
            return await asyncio.shield(pending)

        loop = asyncio.get_running_loop()
        now = loop.time()
        elapsed = now - last_execution
        if elapsed >= interval_seconds:
            last_execution = now
            return await fn(*args, **kwargs)

        target: asyncio.Future[R] = loop.create_future()
        pending = target
        loop.call_later(interval_seconds - elapsed, fire, args, kwargs, target)
        return await asyncio.shield(target)

    return throttled
