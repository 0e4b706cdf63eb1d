"""Retry with exponential backoff, raising or collecting variants."""

import time
from collections.abc import Awaitable, Callable

from bounded_tasks.core.clock import sleep
from bounded_tasks.retry.domain.observer import RetryObserver
from bounded_tasks.retry.domain.policy import RetryPolicy, compute_backoff_delay
from bounded_tasks.retry.infrastructure.observer import StructlogRetryObserver
from bounded_tasks.runner.domain.result import TaskResult


async def retry[R](
    operation: Callable[[], Awaitable[R]],
    policy: RetryPolicy | None = None,
    observer: RetryObserver | None = None,
) -> R:
    """Invoke ``operation`` until it succeeds or the policy gives up.

    Attempts are numbered from 1. After a failed attempt:
      - if the policy's predicate rejects the error, it is raised immediately;
      - if that was the last allowed attempt, it is raised;
      - otherwise ``on_retry`` is called, the backoff delay is slept, and the
        operation is tried again.

    No delay follows the final attempt. The error raised on exhaustion is the
    last underlying error, unwrapped.
    """
    policy = policy or RetryPolicy()
    observer = observer or StructlogRetryObserver()

    attempt = 1
    while True:
        try:
            return await operation()
        except Exception as exc:
            if policy.retry_predicate is not None and not policy.retry_predicate(exc):
                observer.retry_aborted(attempt=attempt, reason=str(exc))
                raise
            if attempt >= policy.max_attempts:
                observer.retry_exhausted(attempts=attempt, reason=str(exc))
                raise

            if policy.on_retry is not None:
                policy.on_retry(attempt, exc)

            delay_seconds = compute_backoff_delay(policy=policy, attempt=attempt)
            observer.retry_scheduled(
                attempt=attempt,
                max_attempts=policy.max_attempts,
                reason=str(exc),
                delay_seconds=delay_seconds,
            )
        # Backoff sleep happens outside the except block.
        await sleep(delay_seconds)
        attempt += 1


async def execute_with_retry[R](
    operation: Callable[[], Awaitable[R]],
    policy: RetryPolicy | None = None,
    observer: RetryObserver | None = None,
) -> TaskResult[R]:
    """Like ``retry`` but never raises for operation failures.

    Returns a TaskResult carrying the value or the final error, the elapsed
    time across all attempts, and how many attempts were made.
    """
    attempts = 0

    async def counted() -> R:
        nonlocal attempts
        attempts += 1
        return await operation()

    started_at = time.monotonic()
    try:
        value = await retry(counted, policy=policy, observer=observer)
    except Exception as exc:
        return TaskResult.failure(
            error=exc,
            elapsed_seconds=time.monotonic() - started_at,
            attempts=max(attempts, 1),
        )
    return TaskResult.success(
        value=value,
        elapsed_seconds=time.monotonic() - started_at,
        attempts=attempts,
    )
