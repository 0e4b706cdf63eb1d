"""Error types raised by config infrastructure."""

from pathlib import Path

from bounded_tasks.core.errors import BoundedTasksError


class MissingEnvVarsError(BoundedTasksError):
    """Raised when referenced environment variables are unset and have no fallback."""

    def __init__(self, missing_vars: list[str]) -> None:
        self.missing_vars = missing_vars
        super().__init__(
            "Failed to interpolate config: unset environment variables: "
            f"{', '.join(sorted(missing_vars))}"
        )


class ConfigValidationError(BoundedTasksError):
    """Raised when the loaded config violates the schema.

    ``fields`` lists the dotted paths of the offending settings, e.g.
    ``batch.batch_size``.
    """

    def __init__(self, reason: str, fields: list[str] | None = None) -> None:
        self.fields = fields or []
        super().__init__(f"Failed to validate config: {reason}")


class ConfigLoadError(BoundedTasksError):
    """Raised when the config file is missing, unreadable, or not valid YAML."""

    def __init__(self, path: Path, reason: str = "file not found") -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load config {path}: {reason}")
