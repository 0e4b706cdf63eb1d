"""BoundedRunner — runs many tasks while capping how many are in flight at once."""

import asyncio
import time
import uuid
from collections.abc import AsyncIterator, Awaitable, Iterable, Sized
from contextlib import aclosing

from bounded_tasks.config.domain.timeout import TimeoutConfig
from bounded_tasks.core.futures import abandon, cancel_requested
from bounded_tasks.core.errors import InvalidConcurrencyLimitError
from bounded_tasks.runner.domain.observer import RunnerObserver
from bounded_tasks.runner.domain.result import TaskResult
from bounded_tasks.runner.domain.task import Task
from bounded_tasks.runner.infrastructure.observer import StructlogRunnerObserver
from bounded_tasks.timeout.application.timeout import with_timeout


class BoundedRunner:
    """Executes tasks with at most ``limit`` of them in flight.

    Tasks are started strictly in input order: task k is never started before
    tasks 0..k-1 have been started, although they may complete in any order.
    When every slot is taken the runner waits for any in-flight task to finish
    and then immediately starts the next pending one.

    Two result shapes are offered as separate operations:
      - ``run`` collects one TaskResult per task and never raises for a task
        failure;
      - ``run_fail_fast`` returns plain values and raises the first failure it
        observes without waiting for the remaining in-flight tasks.

    In-flight tasks are never cancelled by the runner, except that
    ``cancel_on_timeout`` cancels a task whose per-task deadline has passed. A
    task that ends cancelled on its own is recorded as a failure like any
    other. The bookkeeping below is only touched from the event loop thread,
    so it needs no lock.
    """

    def __init__(
        self,
        limit: int,
        timeout_seconds: float | None = None,
        observer: RunnerObserver | None = None,
        cancel_on_timeout: bool = False,
    ) -> None:
        if limit < 1:
            raise InvalidConcurrencyLimitError(limit=limit)
        self._limit = limit
        self._timeout_seconds = timeout_seconds
        self._cancel_on_timeout = cancel_on_timeout
        self._observer = observer or StructlogRunnerObserver()

    @classmethod
    def from_config(
        cls,
        limit: int,
        config: TimeoutConfig,
        observer: RunnerObserver | None = None,
    ) -> "BoundedRunner":
        """Build a runner whose per-task deadline comes from a TimeoutConfig."""
        return cls(
            limit=limit,
            timeout_seconds=config.timeout_seconds,
            observer=observer,
            cancel_on_timeout=config.cancel_on_timeout,
        )

    @property
    def limit(self) -> int:
        return self._limit

    async def run[R](self, tasks: Iterable[Task[R]]) -> list[TaskResult[R]]:
        """Run every task and return their results in input order.

        ``tasks`` may be a lazy iterable; the next task is pulled from it only
        once a slot is free.
        """
        run_id = str(uuid.uuid4())
        self._observer.run_started(
            run_id=run_id, limit=self._limit, total=_known_length(tasks)
        )
        started_at = time.monotonic()

        results: dict[int, TaskResult[R]] = {}
        async with aclosing(self._dispatch(run_id=run_id, tasks=tasks)) as completions:
            async for index, result in completions:
                results[index] = result

        ordered = [results[index] for index in range(len(results))]
        self._observer.run_completed(
            run_id=run_id,
            total=len(ordered),
            failed=sum(1 for result in ordered if not result.succeeded),
            elapsed_seconds=time.monotonic() - started_at,
        )
        return ordered

    async def run_fail_fast[R](self, tasks: Iterable[Task[R]]) -> list[R]:
        """Run every task and return their values in input order.

        Raises the error of the first task observed to fail (the lowest index
        when several fail in the same loop iteration). No further tasks are
        started after that; tasks already in flight keep running unobserved.
        """
        run_id = str(uuid.uuid4())
        self._observer.run_started(
            run_id=run_id, limit=self._limit, total=_known_length(tasks)
        )
        started_at = time.monotonic()

        values: dict[int, R] = {}
        async with aclosing(self._dispatch(run_id=run_id, tasks=tasks)) as completions:
            async for index, result in completions:
                if not result.succeeded:
                    self._observer.run_aborted(
                        run_id=run_id, index=index, reason=str(result.error)
                    )
                    result.unwrap()
                values[index] = result.value  # type: ignore[assignment]

        self._observer.run_completed(
            run_id=run_id,
            total=len(values),
            failed=0,
            elapsed_seconds=time.monotonic() - started_at,
        )
        return [values[index] for index in range(len(values))]

    async def _dispatch[R](
        self, run_id: str, tasks: Iterable[Task[R]]
    ) -> AsyncIterator[tuple[int, TaskResult[R]]]:
        """Yield ``(index, result)`` pairs in completion order.

        Closing the generator early abandons whatever is still in flight.
        """
        pending = enumerate(tasks)
        in_flight: dict[asyncio.Task[TaskResult[R]], int] = {}
        exhausted = False

        try:
            while True:
                while not exhausted and len(in_flight) < self._limit:
                    next_task = next(pending, None)
                    if next_task is None:
                        exhausted = True
                        break
                    index, task = next_task
                    in_flight[asyncio.create_task(self._execute(task))] = index
                    self._observer.task_started(
                        run_id=run_id, index=index, in_flight=len(in_flight)
                    )

                if not in_flight:
                    return

                done, _ = await asyncio.wait(
                    in_flight, return_when=asyncio.FIRST_COMPLETED
                )
                for finished in sorted(done, key=in_flight.__getitem__):
                    index = in_flight.pop(finished)
                    result = _settled(finished)
                    if result.succeeded:
                        self._observer.task_succeeded(
                            run_id=run_id,
                            index=index,
                            elapsed_seconds=result.elapsed_seconds,
                        )
                    else:
                        self._observer.task_failed(
                            run_id=run_id,
                            index=index,
                            reason=str(result.error),
                            elapsed_seconds=result.elapsed_seconds,
                        )
                    yield index, result
        finally:
            for orphan in in_flight:
                abandon(orphan)

    async def _execute[R](self, task: Task[R]) -> TaskResult[R]:
        started_at = time.monotonic()
        try:
            operation = task()
            if self._timeout_seconds is not None:
                value = await with_timeout(
                    operation,
                    self._timeout_seconds,
                    cancel_on_timeout=self._cancel_on_timeout,
                )
            else:
                value = await operation
        except asyncio.CancelledError as exc:
            # Only a cancel() aimed at this task propagates; an inner future
            # that was cancelled is this task's failure.
            if cancel_requested():
                raise
            return TaskResult.failure(
                error=exc, elapsed_seconds=time.monotonic() - started_at
            )
        except Exception as exc:
            return TaskResult.failure(
                error=exc, elapsed_seconds=time.monotonic() - started_at
            )
        return TaskResult.success(
            value=value, elapsed_seconds=time.monotonic() - started_at
        )


def _known_length(tasks: Iterable[object]) -> int | None:
    return len(tasks) if isinstance(tasks, Sized) else None


def _settled[R](finished: asyncio.Task[TaskResult[R]]) -> TaskResult[R]:
    """The recorded outcome of a finished task, a failure if it was cancelled."""
    if finished.cancelled():
        return TaskResult.failure(error=asyncio.CancelledError(), elapsed_seconds=0.0)
    return finished.result()


async def run_bounded[R](
    tasks: Iterable[Task[R]],
    limit: int,
    timeout_seconds: float | None = None,
    observer: RunnerObserver | None = None,
    cancel_on_timeout: bool = False,
) -> list[TaskResult[R]]:
    """Collecting mode: one TaskResult per task, index-aligned with ``tasks``."""
    runner = BoundedRunner(
        limit=limit,
        timeout_seconds=timeout_seconds,
        observer=observer,
        cancel_on_timeout=cancel_on_timeout,
    )
    return await runner.run(tasks)


async def limit_concurrency[R](
    tasks: Iterable[Task[R]],
    limit: int,
    timeout_seconds: float | None = None,
    observer: RunnerObserver | None = None,
    cancel_on_timeout: bool = False,
) -> list[R]:
    """Fail-fast mode: values index-aligned with ``tasks``, or the first failure raised."""
    runner = BoundedRunner(
        limit=limit,
        timeout_seconds=timeout_seconds,
        observer=observer,
        cancel_on_timeout=cancel_on_timeout,
    )
    return await runner.run_fail_fast(tasks)


async def sequence[R](tasks: Iterable[Task[R]]) -> list[R]:
    """Run tasks one after another; the first failure propagates."""
    results: list[R] = []
    for task in tasks:
        results.append(await task())
    return results


async def parallel[R](tasks: Iterable[Task[R]]) -> list[R | Exception]:
    """Run all tasks at once with no bound; failures are returned in place of values."""

    async def settle(task: Task[R]) -> R | Exception:
        try:
            return await task()
        except Exception as exc:
            return exc

    return list(await asyncio.gather(*(settle(task) for task in tasks)))


async def all_settled[R](operations: Iterable[Awaitable[R]]) -> list[TaskResult[R]]:
    """Await every operation concurrently and report each outcome as a TaskResult."""
    started_at = time.monotonic()

    async def settle(operation: Awaitable[R]) -> TaskResult[R]:
        try:
            value = await operation
        except Exception as exc:
            return TaskResult.failure(
                error=exc, elapsed_seconds=time.monotonic() - started_at
            )
        return TaskResult.success(
            value=value, elapsed_seconds=time.monotonic() - started_at
        )

    return list(await asyncio.gather(*(settle(op) for op in operations)))
