"""QueueState — the two bookkeeping states of a TaskQueue."""

from enum import Enum


class QueueState(Enum):
    IDLE = "idle"
    DRAINING = "draining"
