"""Structlog implementation of the ConfigObserver port."""

import structlog


class StructlogConfigObserver:
    """Delegates config domain events to structlog.

    Satisfies the ConfigObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def config_loaded(self, name: str, path: str) -> None:
        self._log.info("config.loaded", name=name, path=path)

    def config_max_delay_below_initial_delay_warning(
        self, initial_delay_seconds: float, max_delay_seconds: float
    ) -> None:
        self._log.warning(
            "config.max_delay_below_initial_delay_warning",
            initial_delay_seconds=initial_delay_seconds,
            max_delay_seconds=max_delay_seconds,
            message="Every retry delay will be capped at max_delay_seconds",
        )
