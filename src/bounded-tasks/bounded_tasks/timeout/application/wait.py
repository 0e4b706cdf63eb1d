"""Polling wait for a condition to become true."""

import inspect
import time
from collections.abc import Awaitable, Callable

from bounded_tasks.config.domain.defaults import (
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_WAIT_INTERVAL_SECONDS,
)
from bounded_tasks.core.clock import sleep
from bounded_tasks.core.errors import ConditionNotMetError


async def wait_for_condition(
    condition: Callable[[], bool | Awaitable[bool]],
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    interval_seconds: float = DEFAULT_WAIT_INTERVAL_SECONDS,
    message: str | None = None,
) -> None:
    """Poll ``condition`` (sync or async) every ``interval_seconds`` until it is true.

    Raises:
        ConditionNotMetError: if the condition is still false after ``timeout_seconds``.
    """
    started_at = time.monotonic()
    while time.monotonic() - started_at < timeout_seconds:
        result = condition()
        if inspect.isawaitable(result):
            result = await result
        if result:
            return
        await sleep(interval_seconds)

    raise ConditionNotMetError(timeout_seconds=timeout_seconds, message=message)
