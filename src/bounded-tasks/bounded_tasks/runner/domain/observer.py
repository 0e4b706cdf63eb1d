"""Observer port for the runner domain — defines events in domain language."""

from typing import Protocol


class RunnerObserver(Protocol):
    """Observer port emitting structured events while a bounded run executes.

    Implementations may log to structlog, render progress, or record for tests.
    ``total`` is None when the tasks come from a stream of unknown length.
    """

    def run_started(self, run_id: str, limit: int, total: int | None) -> None: ...

    def task_started(self, run_id: str, index: int, in_flight: int) -> None: ...

    def task_succeeded(
        self, run_id: str, index: int, elapsed_seconds: float
    ) -> None: ...

    def task_failed(
        self, run_id: str, index: int, reason: str, elapsed_seconds: float
    ) -> None: ...

    def run_completed(
        self, run_id: str, total: int, failed: int, elapsed_seconds: float
    ) -> None: ...

    def run_aborted(self, run_id: str, index: int, reason: str) -> None: ...
