"""Base exception classes for all bounded-tasks errors."""


class BoundedTasksError(Exception):
    """Base class for all bounded-tasks errors."""

    def __init__(self, message: str, retriable: bool = False) -> None:
        super().__init__(message)
        self.retriable = retriable


class ConfigurationError(BoundedTasksError):
    """Raised when runner, batch, or retry parameters are invalid.

    Always raised before any task is started.
    """


class InvalidConcurrencyLimitError(ConfigurationError):
    """Raised when a concurrency limit is not a positive integer."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(
            f"Failed to configure runner: concurrency limit must be >= 1, got {limit}"
        )


class InvalidBatchSizeError(ConfigurationError):
    """Raised when a batch size is not a positive integer."""

    def __init__(self, batch_size: int) -> None:
        self.batch_size = batch_size
        super().__init__(
            f"Failed to configure batches: batch size must be >= 1, got {batch_size}"
        )


class InvalidRetryPolicyError(ConfigurationError):
    """Raised when a RetryPolicy violates one of its invariants."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to configure retry policy: {reason}")


class TimeoutExceededError(BoundedTasksError):
    """Raised when a deadline elapses before the awaited operation settles.

    Retriable: the operation may well succeed on a later attempt.
    """

    def __init__(self, timeout_seconds: float, message: str | None = None) -> None:
        self.timeout_seconds = timeout_seconds
        super().__init__(
            message
            or f"Failed to complete operation: timed out after {timeout_seconds}s",
            retriable=True,
        )


class ConditionNotMetError(BoundedTasksError):
    """Raised when a polled condition stays false for the whole wait window."""

    def __init__(self, timeout_seconds: float, message: str | None = None) -> None:
        self.timeout_seconds = timeout_seconds
        super().__init__(
            message
            or f"Failed to observe condition: not met within {timeout_seconds}s"
        )


class OperationCancelledError(BoundedTasksError):
    """Raised to waiters of a Cancellable whose cancel() was called.

    Only the waiting stops; the underlying operation keeps running.
    """

    def __init__(self) -> None:
        super().__init__("Failed to await operation: waiting was cancelled")
