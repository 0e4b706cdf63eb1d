"""CompositeRunnerObserver — fans out all events to a list of observers."""

from bounded_tasks.runner.domain.observer import RunnerObserver


class CompositeRunnerObserver:
    """Delegates every observer event to each observer in order.

    Does NOT inherit from RunnerObserver (structural typing via Protocol).
    """

    def __init__(self, observers: list[RunnerObserver]) -> None:
        self._observers = observers

    def run_started(self, run_id: str, limit: int, total: int | None) -> None:
        for obs in self._observers:
            obs.run_started(run_id=run_id, limit=limit, total=total)

    def task_started(self, run_id: str, index: int, in_flight: int) -> None:
        for obs in self._observers:
            obs.task_started(run_id=run_id, index=index, in_flight=in_flight)

    def task_succeeded(self, run_id: str, index: int, elapsed_seconds: float) -> None:
        for obs in self._observers:
            obs.task_succeeded(
                run_id=run_id, index=index, elapsed_seconds=elapsed_seconds
            )

    def task_failed(
        self, run_id: str, index: int, reason: str, elapsed_seconds: float
    ) -> None:
        for obs in self._observers:
            obs.task_failed(
                run_id=run_id,
                index=index,
                reason=reason,
                elapsed_seconds=elapsed_seconds,
            )

    def run_completed(
        self, run_id: str, total: int, failed: int, elapsed_seconds: float
    ) -> None:
        for obs in self._observers:
            obs.run_completed(
                run_id=run_id,
                total=total,
                failed=failed,
                elapsed_seconds=elapsed_seconds,
            )

    def run_aborted(self, run_id: str, index: int, reason: str) -> None:
        for obs in self._observers:
            obs.run_aborted(run_id=run_id, index=index, reason=reason)
