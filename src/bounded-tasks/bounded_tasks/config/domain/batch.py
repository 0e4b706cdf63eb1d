"""Batch processing configuration model."""

from pydantic import BaseModel, Field

from bounded_tasks.config.domain.defaults import DEFAULT_BATCH_SIZE, DEFAULT_CONCURRENCY


class BatchConfig(BaseModel, frozen=True):
    batch_size: int = Field(default=DEFAULT_BATCH_SIZE, ge=1)
    concurrency: int = Field(default=DEFAULT_CONCURRENCY, ge=1)
    delay_seconds: float = Field(default=0.0, ge=0)
