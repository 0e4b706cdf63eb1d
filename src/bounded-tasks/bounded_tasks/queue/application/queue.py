"""TaskQueue — a reusable bounded-concurrency queue that accepts tasks over time."""

import asyncio
import functools
import time
import uuid
from collections import deque

from bounded_tasks.config.domain.queue import QueueConfig
from bounded_tasks.core.futures import cancel_requested
from bounded_tasks.queue.domain.observer import QueueObserver
from bounded_tasks.queue.domain.state import QueueState
from bounded_tasks.queue.infrastructure.observer import StructlogQueueObserver
from bounded_tasks.runner.domain.result import TaskResult
from bounded_tasks.runner.domain.task import Task
from bounded_tasks.timeout.application.timeout import with_timeout


class TaskQueue[R]:
    """Mutable FIFO of tasks drained with at most ``config.concurrency`` in flight.

    State machine:
      IDLE      — nothing pending and nothing (current) in flight.
      DRAINING  — something pending or in flight; returns to IDLE once both
                  reach zero.

    ``clear()`` drops pending tasks and accumulated results and puts the
    bookkeeping back to IDLE. Tasks that were already running are not
    interrupted: they keep their concurrency slot until they finish and their
    results are thrown away.

    Failures never propagate out of the queue. Each one is recorded as a failed
    TaskResult and reported to the observer; a task that ends cancelled counts
    as a failure.

    With ``auto_start`` enabled, ``add()`` must be called from inside a running
    event loop.
    """

    def __init__(
        self,
        config: QueueConfig | None = None,
        observer: QueueObserver | None = None,
    ) -> None:
        self._config = config or QueueConfig()
        self._observer = observer or StructlogQueueObserver()
        self._queue_id = str(uuid.uuid4())
        self._pending: deque[tuple[int, Task[R]]] = deque()
        # Every running asyncio task, stale ones included; this is what occupies slots.
        self._running: set[asyncio.Task[TaskResult[R]]] = set()
        self._current_running = 0
        self._results: dict[int, TaskResult[R]] = {}
        self._next_sequence = 0
        self._generation = 0
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def queue_id(self) -> str:
        return self._queue_id

    @property
    def config(self) -> QueueConfig:
        return self._config

    @property
    def state(self) -> QueueState:
        if self._pending or self._current_running:
            return QueueState.DRAINING
        return QueueState.IDLE

    @property
    def size(self) -> int:
        """Number of tasks waiting to start."""
        return len(self._pending)

    @property
    def in_flight(self) -> int:
        """Number of tasks occupying a slot, including ones orphaned by clear()."""
        return len(self._running)

    @property
    def is_running(self) -> bool:
        return bool(self._running)

    def add(self, task: Task[R]) -> None:
        sequence = self._next_sequence
        self._next_sequence += 1
        self._pending.append((sequence, task))
        self._idle.clear()
        self._observer.task_enqueued(
            queue_id=self._queue_id, sequence=sequence, pending=len(self._pending)
        )
        if self._config.auto_start:
            self._fill_slots()

    async def process(self) -> list[TaskResult[R]]:
        """Drain everything added so far and return results in submission order.

        Returns every result accumulated since the last ``clear()``, so calling
        it again after more ``add()`` calls includes earlier results too.
        """
        self._fill_slots()
        self._check_idle()
        await self._idle.wait()
        return [self._results[sequence] for sequence in sorted(self._results)]

    def clear(self) -> None:
        dropped_pending = len(self._pending)
        running_discarded = self._current_running
        self._pending.clear()
        self._results = {}
        self._generation += 1
        self._current_running = 0
        self._observer.queue_cleared(
            queue_id=self._queue_id,
            dropped_pending=dropped_pending,
            running_discarded=running_discarded,
        )
        self._idle.set()

    def _fill_slots(self) -> None:
        while self._pending and len(self._running) < self._config.concurrency:
            sequence, task = self._pending.popleft()
            running = asyncio.create_task(self._execute(task))
            self._running.add(running)
            self._current_running += 1
            running.add_done_callback(
                functools.partial(
                    self._task_finished, sequence=sequence, generation=self._generation
                )
            )

    async def _execute(self, task: Task[R]) -> TaskResult[R]:
        started_at = time.monotonic()
        try:
            operation = task()
            if self._config.timeout_seconds is not None:
                value = await with_timeout(
                    operation,
                    self._config.timeout_seconds,
                    cancel_on_timeout=self._config.cancel_on_timeout,
                )
            else:
                value = await operation
        except asyncio.CancelledError as exc:
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

    def _task_finished(
        self,
        running: asyncio.Task[TaskResult[R]],
        sequence: int,
        generation: int,
    ) -> None:
        self._running.discard(running)
        if generation == self._generation:
            self._current_running -= 1
            if running.cancelled():
                result = TaskResult.failure(
                    error=asyncio.CancelledError(), elapsed_seconds=0.0
                )
            else:
                result = running.result()
            self._results[sequence] = result
            if not result.succeeded:
                self._observer.task_failed(
                    queue_id=self._queue_id,
                    sequence=sequence,
                    reason=str(result.error),
                )
        self._fill_slots()
        self._check_idle()

    def _check_idle(self) -> None:
        if self.state is not QueueState.IDLE or self._idle.is_set():
            return
        self._idle.set()
        self._observer.queue_drained(
            queue_id=self._queue_id,
            completed=len(self._results),
            failed=sum(1 for result in self._results.values() if not result.succeeded),
        )


def create_task_queue(
    config: QueueConfig | None = None, observer: QueueObserver | None = None
) -> TaskQueue:
    return TaskQueue(config=config, observer=observer)
