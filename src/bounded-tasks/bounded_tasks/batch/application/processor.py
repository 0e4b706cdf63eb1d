"""process_batches — feed fixed-size batches through the bounded runner."""

import uuid
from collections.abc import Awaitable, Callable, Sequence

from bounded_tasks.batch.domain.job import BatchJob
from bounded_tasks.batch.domain.observer import BatchObserver
from bounded_tasks.batch.infrastructure.observer import StructlogBatchObserver
from bounded_tasks.config.domain.defaults import DEFAULT_BATCH_SIZE, DEFAULT_CONCURRENCY
from bounded_tasks.core.clock import sleep
from bounded_tasks.runner.application.runner import BoundedRunner
from bounded_tasks.runner.domain.observer import RunnerObserver
from bounded_tasks.runner.domain.task import Task

type BatchProcessorFn[T, R] = Callable[[list[T]], Awaitable[Sequence[R]]]
type BatchHook[T] = Callable[[list[T], int], None]
type ProgressHook = Callable[[int, int], None]


async def process_batches[T, R](
    items: Sequence[T],
    processor: BatchProcessorFn[T, R],
    batch_size: int = DEFAULT_BATCH_SIZE,
    concurrency: int = DEFAULT_CONCURRENCY,
    delay_seconds: float = 0.0,
    on_batch: BatchHook[T] | None = None,
    on_progress: ProgressHook | None = None,
    observer: BatchObserver | None = None,
    runner_observer: RunnerObserver | None = None,
) -> list[R]:
    """Process ``items`` in contiguous batches, at most ``concurrency`` batches at a time.

    Results are flattened in partition order, regardless of which batch
    finished first. The first processor failure propagates (fail-fast).

    Hook ordering:
      - ``on_batch(batch, index)`` fires when a batch starts, in partition order.
      - ``on_progress(processed, total)`` fires after each batch finishes, in
        COMPLETION order, which can differ from partition order. ``processed``
        is the cumulative number of items in finished batches, so it only
        ever grows.

    ``delay_seconds`` is slept after a batch finishes, while it still holds its
    slot, and only if some batch has not started yet. It therefore delays the
    start of the next batch in that slot and never follows the final batch.
    """
    job = BatchJob(items=items, batch_size=batch_size, concurrency=concurrency)
    observer = observer or StructlogBatchObserver()
    job_id = str(uuid.uuid4())
    batches = job.batches()
    total = job.total_items
    observer.batches_planned(
        job_id=job_id,
        total_items=total,
        batch_count=len(batches),
        concurrency=job.concurrency,
    )

    processed = 0
    started = 0

    def make_task(batch_index: int, batch: list[T]) -> Task[list[R]]:
        async def run_batch() -> list[R]:
            nonlocal processed, started
            started += 1
            if on_batch is not None:
                on_batch(batch, batch_index)
            observer.batch_started(job_id=job_id, batch_index=batch_index, size=len(batch))

            batch_results = await processor(batch)

            processed += len(batch)
            observer.batch_completed(
                job_id=job_id, batch_index=batch_index, processed=processed, total=total
            )
            if on_progress is not None:
                on_progress(processed, total)
            if delay_seconds > 0 and started < len(batches):
                await sleep(delay_seconds)
            return list(batch_results)

        return run_batch

    runner = BoundedRunner(limit=job.concurrency, observer=runner_observer)
    batch_results = await runner.run_fail_fast(
        [make_task(index, batch) for index, batch in enumerate(batches)]
    )
    return [result for batch in batch_results for result in batch]
