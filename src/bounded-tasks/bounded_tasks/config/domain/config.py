"""Top-level BoundedTasksConfig aggregate — the root configuration object."""

from pydantic import BaseModel, Field

from bounded_tasks.config.domain.batch import BatchConfig
from bounded_tasks.config.domain.queue import QueueConfig
from bounded_tasks.config.domain.retry import RetryConfig
from bounded_tasks.config.domain.timeout import TimeoutConfig


class BoundedTasksConfig(BaseModel, frozen=True):
    """Root configuration aggregate; every section falls back to its defaults.

    Instances are passed explicitly to the components that need them; there
    is no process-wide default instance.
    """

    name: str = Field(default="default", min_length=1)
    retry: RetryConfig = RetryConfig()
    timeout: TimeoutConfig = TimeoutConfig()
    batch: BatchConfig = BatchConfig()
    queue: QueueConfig = QueueConfig()
