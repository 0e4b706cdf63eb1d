"""BatchJob — a list of items split into contiguous fixed-size batches."""

import math
from collections.abc import Sequence
from dataclasses import dataclass

from bounded_tasks.config.domain.batch import BatchConfig
from bounded_tasks.core.errors import InvalidBatchSizeError, InvalidConcurrencyLimitError


def partition[T](items: Sequence[T], batch_size: int) -> list[list[T]]:
    """Split ``items`` into contiguous chunks of ``batch_size``; the last may be smaller.

    Raises:
        InvalidBatchSizeError: if batch_size < 1.
    """
    if batch_size < 1:
        raise InvalidBatchSizeError(batch_size=batch_size)
    return [
        list(items[start : start + batch_size])
        for start in range(0, len(items), batch_size)
    ]


@dataclass(frozen=True)
class BatchJob[T]:
    items: Sequence[T]
    batch_size: int
    concurrency: int

    def __post_init__(self) -> None:
        if self.batch_size < 1:
            raise InvalidBatchSizeError(batch_size=self.batch_size)
        if self.concurrency < 1:
            raise InvalidConcurrencyLimitError(limit=self.concurrency)

    @classmethod
    def from_config(cls, items: Sequence[T], config: BatchConfig) -> "BatchJob[T]":
        return cls(
            items=items, batch_size=config.batch_size, concurrency=config.concurrency
        )

    @property
    def total_items(self) -> int:
        return len(self.items)

    @property
    def batch_count(self) -> int:
        return math.ceil(len(self.items) / self.batch_size)

    def batches(self) -> list[list[T]]:
        return partition(self.items, self.batch_size)
