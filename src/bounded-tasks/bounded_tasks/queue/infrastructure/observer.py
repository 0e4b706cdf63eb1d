"""StructlogQueueObserver — production observer that delegates to structlog."""

import structlog


class StructlogQueueObserver:
    """Logs queue domain events to structlog.

    Does NOT inherit from QueueObserver (structural typing via Protocol).
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def task_enqueued(self, queue_id: str, sequence: int, pending: int) -> None:
        self._log.debug(
            "queue.task.enqueued", queue_id=queue_id, sequence=sequence, pending=pending
        )

    def task_failed(self, queue_id: str, sequence: int, reason: str) -> None:
        self._log.error(
            "queue.task.failed", queue_id=queue_id, sequence=sequence, reason=reason
        )

    def queue_drained(self, queue_id: str, completed: int, failed: int) -> None:
        self._log.info(
            "queue.drained", queue_id=queue_id, completed=completed, failed=failed
        )

    def queue_cleared(
        self, queue_id: str, dropped_pending: int, running_discarded: int
    ) -> None:
        self._log.info(
            "queue.cleared",
            queue_id=queue_id,
            dropped_pending=dropped_pending,
            running_discarded=running_discarded,
        )
