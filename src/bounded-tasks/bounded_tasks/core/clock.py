"""Sleep and timing primitives every other module builds on."""

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass


async def sleep(seconds: float) -> None:
    """Suspend the calling task for at least ``seconds``."""
    await asyncio.sleep(max(0.0, seconds))


delay = sleep


@dataclass(frozen=True)
class TimedResult[R]:
    value: R
    elapsed_seconds: float


async def time_async[R](operation: Callable[[], Awaitable[R]]) -> TimedResult[R]:
    """Run ``operation`` and measure its wall-clock duration on the monotonic clock.

    Errors raised by the operation propagate unchanged; no timing is reported
    for a failed call.
    """
    started_at = time.monotonic()
    value = await operation()
    return TimedResult(value=value, elapsed_seconds=time.monotonic() - started_at)
