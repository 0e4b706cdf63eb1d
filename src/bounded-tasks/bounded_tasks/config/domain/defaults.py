"""Default values shared by the config models and the helper functions."""

from typing import Final

DEFAULT_TIMEOUT_SECONDS: Final = 30.0
DEFAULT_RETRY_ATTEMPTS: Final = 3
DEFAULT_RETRY_DELAY_SECONDS: Final = 1.0
DEFAULT_BACKOFF_FACTOR: Final = 2.0
DEFAULT_MAX_DELAY_SECONDS: Final = 30.0
DEFAULT_CONCURRENCY: Final = 5
DEFAULT_BATCH_SIZE: Final = 10
DEFAULT_DEBOUNCE_DELAY_SECONDS: Final = 0.3
DEFAULT_THROTTLE_INTERVAL_SECONDS: Final = 1.0
DEFAULT_QUEUE_CONCURRENCY: Final = 3
DEFAULT_MEMOIZE_TTL_SECONDS: Final = 300.0
DEFAULT_WAIT_INTERVAL_SECONDS: Final = 0.1
