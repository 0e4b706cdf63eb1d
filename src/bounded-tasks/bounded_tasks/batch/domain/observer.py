"""Observer port for the batch domain — defines events in domain language."""

from typing import Protocol


class BatchObserver(Protocol):
    def batches_planned(
        self, job_id: str, total_items: int, batch_count: int, concurrency: int
    ) -> None: ...

    def batch_started(self, job_id: str, batch_index: int, size: int) -> None: ...

    def batch_completed(
        self, job_id: str, batch_index: int, processed: int, total: int
    ) -> None: ...
