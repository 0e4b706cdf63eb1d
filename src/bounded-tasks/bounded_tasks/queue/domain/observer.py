"""Observer port for the queue domain — defines events in domain language."""

from typing import Protocol


class QueueObserver(Protocol):
    def task_enqueued(self, queue_id: str, sequence: int, pending: int) -> None: ...

    def task_failed(self, queue_id: str, sequence: int, reason: str) -> None: ...

    def queue_drained(self, queue_id: str, completed: int, failed: int) -> None: ...

    def queue_cleared(
        self, queue_id: str, dropped_pending: int, running_discarded: int
    ) -> None: ...
