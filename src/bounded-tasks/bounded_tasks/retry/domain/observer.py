"""Observer port for the retry domain — defines events in domain language."""

from typing import Protocol


class RetryObserver(Protocol):
    def retry_scheduled(
        self, attempt: int, max_attempts: int, reason: str, delay_seconds: float
    ) -> None: ...

    def retry_aborted(self, attempt: int, reason: str) -> None: ...

    def retry_exhausted(self, attempts: int, reason: str) -> None: ...
