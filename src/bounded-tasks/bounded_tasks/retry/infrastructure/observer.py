"""StructlogRetryObserver — production observer that delegates to structlog."""

import structlog


class StructlogRetryObserver:
    """Logs retry domain events to structlog.

    Does NOT inherit from RetryObserver (structural typing via Protocol).
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def retry_scheduled(
        self, attempt: int, max_attempts: int, reason: str, delay_seconds: float
    ) -> None:
        self._log.warning(
            "retry.scheduled",
            attempt=attempt,
            max_attempts=max_attempts,
            reason=reason,
            delay_seconds=round(delay_seconds, 3),
        )

    def retry_aborted(self, attempt: int, reason: str) -> None:
        self._log.error("retry.aborted", attempt=attempt, reason=reason)

    def retry_exhausted(self, attempts: int, reason: str) -> None:
        self._log.error("retry.exhausted", attempts=attempts, reason=reason)
