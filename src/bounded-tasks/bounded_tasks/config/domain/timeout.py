"""Timeout configuration model."""

from pydantic import BaseModel, Field

from bounded_tasks.config.domain.defaults import DEFAULT_TIMEOUT_SECONDS


class TimeoutConfig(BaseModel, frozen=True):
    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    cancel_on_timeout: bool = False
