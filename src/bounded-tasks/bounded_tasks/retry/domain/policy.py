"""RetryPolicy — how many times to try an operation and how long to wait between tries."""

from collections.abc import Callable
from dataclasses import dataclass

from bounded_tasks.config.domain.defaults import (
    DEFAULT_BACKOFF_FACTOR,
    DEFAULT_MAX_DELAY_SECONDS,
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_RETRY_DELAY_SECONDS,
)
from bounded_tasks.config.domain.retry import RetryConfig
from bounded_tasks.core.errors import InvalidRetryPolicyError

type RetryPredicate = Callable[[Exception], bool]
type RetryHook = Callable[[int, Exception], None]


@dataclass(frozen=True)
class RetryPolicy:
    """Immutable retry policy.

    ``retry_predicate`` returning False marks an error as non-retryable and
    overrides the attempt budget. ``on_retry`` runs before each backoff sleep;
    anything it raises propagates to the caller of ``retry``.

    A plain dataclass rather than a pydantic model because it carries callables.
    """

    max_attempts: int = DEFAULT_RETRY_ATTEMPTS
    initial_delay_seconds: float = DEFAULT_RETRY_DELAY_SECONDS
    backoff_factor: float = DEFAULT_BACKOFF_FACTOR
    max_delay_seconds: float = DEFAULT_MAX_DELAY_SECONDS
    retry_predicate: RetryPredicate | None = None
    on_retry: RetryHook | None = None

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise InvalidRetryPolicyError(
                f"max_attempts must be >= 1, got {self.max_attempts}"
            )
        if self.initial_delay_seconds < 0:
            raise InvalidRetryPolicyError(
                f"initial_delay_seconds must be >= 0, got {self.initial_delay_seconds}"
            )
        if self.backoff_factor < 1:
            raise InvalidRetryPolicyError(
                f"backoff_factor must be >= 1, got {self.backoff_factor}"
            )
        if self.max_delay_seconds < 0:
            raise InvalidRetryPolicyError(
                f"max_delay_seconds must be >= 0, got {self.max_delay_seconds}"
            )

    @classmethod
    def from_config(
        cls,
        config: RetryConfig,
        retry_predicate: RetryPredicate | None = None,
        on_retry: RetryHook | None = None,
    ) -> "RetryPolicy":
        return cls(
            max_attempts=config.max_attempts,
            initial_delay_seconds=config.initial_delay_seconds,
            backoff_factor=config.backoff_factor,
            max_delay_seconds=config.max_delay_seconds,
            retry_predicate=retry_predicate,
            on_retry=on_retry,
        )


def compute_backoff_delay(policy: RetryPolicy, attempt: int) -> float:
    """Delay to sleep after failed ``attempt`` (1-based); no jitter is applied."""
    delay = policy.initial_delay_seconds * policy.backoff_factor ** (attempt - 1)
    return min(delay, policy.max_delay_seconds)
