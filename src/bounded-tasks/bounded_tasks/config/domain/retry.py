"""Retry configuration model."""

from pydantic import BaseModel, Field

from bounded_tasks.config.domain.defaults import (
    DEFAULT_BACKOFF_FACTOR,
    DEFAULT_MAX_DELAY_SECONDS,
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_RETRY_DELAY_SECONDS,
)


class RetryConfig(BaseModel, frozen=True):
    max_attempts: int = Field(default=DEFAULT_RETRY_ATTEMPTS, ge=1)
    initial_delay_seconds: float = Field(default=DEFAULT_RETRY_DELAY_SECONDS, ge=0)
    backoff_factor: float = Field(default=DEFAULT_BACKOFF_FACTOR, ge=1)
    max_delay_seconds: float = Field(default=DEFAULT_MAX_DELAY_SECONDS, ge=0)
