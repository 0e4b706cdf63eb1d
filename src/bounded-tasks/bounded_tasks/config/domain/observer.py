"""Observer port for the config domain — defines events in domain language."""

from typing import Protocol


class ConfigObserver(Protocol):
    def config_loaded(self, name: str, path: str) -> None: ...

    def config_max_delay_below_initial_delay_warning(
        self, initial_delay_seconds: float, max_delay_seconds: float
    ) -> None: ...
