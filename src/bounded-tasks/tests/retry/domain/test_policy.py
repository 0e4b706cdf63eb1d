"""Tests for RetryPolicy invariants and backoff delay computation."""

import pytest

from bounded_tasks.config.domain.retry import RetryConfig
from bounded_tasks.core.errors import InvalidRetryPolicyError
from bounded_tasks.retry.domain.policy import RetryPolicy, compute_backoff_delay


class TestRetryPolicyInvariants:
    def test_defaults(self) -> None:
        policy = RetryPolicy()
        assert policy.max_attempts == 3
        assert policy.initial_delay_seconds == 1.0
        assert policy.backoff_factor == 2.0
        assert policy.max_delay_seconds == 30.0
        assert policy.retry_predicate is None
        assert policy.on_retry is None

    def test_zero_attempts_rejected(self) -> None:
        with pytest.raises(InvalidRetryPolicyError):
            RetryPolicy(max_attempts=0)

    def test_negative_initial_delay_rejected(self) -> None:
        with pytest.raises(InvalidRetryPolicyError):
            RetryPolicy(initial_delay_seconds=-1)

    def test_factor_below_one_rejected(self) -> None:
        with pytest.raises(InvalidRetryPolicyError):
            RetryPolicy(backoff_factor=0.9)

    def test_negative_max_delay_rejected(self) -> None:
        with pytest.raises(InvalidRetryPolicyError):
            RetryPolicy(max_delay_seconds=-1)

    def test_from_config_copies_numbers_and_hooks(self) -> None:
        def never(exc: Exception) -> bool:
            return False

        policy = RetryPolicy.from_config(
            RetryConfig(max_attempts=4, initial_delay_seconds=0.2), retry_predicate=never
        )

        assert policy.max_attempts == 4
        assert policy.initial_delay_seconds == 0.2
        assert policy.retry_predicate is never


class TestComputeBackoffDelay:
    def test_grows_geometrically(self) -> None:
        policy = RetryPolicy(
            max_attempts=5, initial_delay_seconds=0.1, backoff_factor=2, max_delay_seconds=10
        )
        delays = [compute_backoff_delay(policy, attempt) for attempt in (1, 2, 3, 4)]
        assert delays == pytest.approx([0.1, 0.2, 0.4, 0.8])

    def test_capped_at_max_delay(self) -> None:
        policy = RetryPolicy(
            max_attempts=10, initial_delay_seconds=1, backoff_factor=3, max_delay_seconds=5
        )
        assert compute_backoff_delay(policy, 1) == 1
        assert compute_backoff_delay(policy, 2) == 3
        assert compute_backoff_delay(policy, 3) == 5
        assert compute_backoff_delay(policy, 8) == 5

    def test_factor_one_is_constant(self) -> None:
        policy = RetryPolicy(initial_delay_seconds=0.5, backoff_factor=1)
        assert compute_backoff_delay(policy, 3) == 0.5
