"""Task queue configuration model."""

from pydantic import BaseModel, Field

from bounded_tasks.config.domain.defaults import DEFAULT_QUEUE_CONCURRENCY


class QueueConfig(BaseModel, frozen=True):
    concurrency: int = Field(default=DEFAULT_QUEUE_CONCURRENCY, ge=1)
    auto_start: bool = False
    timeout_seconds: float | None = Field(default=None, gt=0)
    # Only meaningful with timeout_seconds set.
    cancel_on_timeout: bool = False
