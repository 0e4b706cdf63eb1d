"""StructlogRunnerObserver — production observer that delegates to structlog."""

import structlog


class StructlogRunnerObserver:
    """Logs runner domain events to structlog.

    Per-task start/success events are logged at debug level; failures and
    run-level events at info or above.

    Does NOT inherit from RunnerObserver (structural typing via Protocol).
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def run_started(self, run_id: str, limit: int, total: int | None) -> None:
        self._log.info("runner.started", run_id=run_id, limit=limit, total=total)

    def task_started(self, run_id: str, index: int, in_flight: int) -> None:
        self._log.debug(
            "runner.task.started", run_id=run_id, index=index, in_flight=in_flight
        )

    def task_succeeded(self, run_id: str, index: int, elapsed_seconds: float) -> None:
        self._log.debug(
            "runner.task.succeeded",
            run_id=run_id,
            index=index,
            elapsed_seconds=round(elapsed_seconds, 3),
        )

    def task_failed(
        self, run_id: str, index: int, reason: str, elapsed_seconds: float
    ) -> None:
        self._log.warning(
            "runner.task.failed",
            run_id=run_id,
            index=index,
            reason=reason,
            elapsed_seconds=round(elapsed_seconds, 3),
        )

    def run_completed(
        self, run_id: str, total: int, failed: int, elapsed_seconds: float
    ) -> None:
        self._log.info(
            "runner.completed",
            run_id=run_id,
            total=total,
            failed=failed,
            elapsed_seconds=round(elapsed_seconds, 2),
        )

    def run_aborted(self, run_id: str, index: int, reason: str) -> None:
        self._log.error("runner.aborted", run_id=run_id, index=index, reason=reason)
