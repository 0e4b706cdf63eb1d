"""Fake ConfigObserver for use in tests — records events without mocking."""


class FakeConfigObserver:
    def __init__(self) -> None:
        self.loaded: list[dict[str, str]] = []
        self.warnings: list[dict[str, float]] = []

    def config_loaded(self, name: str, path: str) -> None:
        self.loaded.append({"name": name, "path": path})

    def config_max_delay_below_initial_delay_warning(
        self, initial_delay_seconds: float, max_delay_seconds: float
    ) -> None:
        self.warnings.append(
            {
                "initial_delay_seconds": initial_delay_seconds,
                "max_delay_seconds": max_delay_seconds,
            }
        )
