"""StructlogBatchObserver — production observer that delegates to structlog."""

import structlog


class StructlogBatchObserver:
    """Logs batch domain events to structlog.

    Does NOT inherit from BatchObserver (structural typing via Protocol).
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def batches_planned(
        self, job_id: str, total_items: int, batch_count: int, concurrency: int
    ) -> None:
        self._log.info(
            "batch.planned",
            job_id=job_id,
            total_items=total_items,
            batch_count=batch_count,
            concurrency=concurrency,
        )

    def batch_started(self, job_id: str, batch_index: int, size: int) -> None:
        self._log.debug(
            "batch.started", job_id=job_id, batch_index=batch_index, size=size
        )

    def batch_completed(
        self, job_id: str, batch_index: int, processed: int, total: int
    ) -> None:
        self._log.info(
            "batch.completed",
            job_id=job_id,
            batch_index=batch_index,
            processed=processed,
            total=total,
            percent=round(100.0 * processed / total, 1) if total else 0.0,
        )
