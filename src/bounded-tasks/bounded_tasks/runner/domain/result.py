"""TaskResult value object — the outcome of running one task."""

from typing import Any, Generic, Self, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

R = TypeVar("R")


class TaskResult(BaseModel, Generic[R]):
    """Immutable record of one task: its outcome, how long it took, how many attempts.

    Exactly one of ``value`` / ``error`` is meaningful, selected by ``succeeded``.
    Pydantic needs arbitrary_types_allowed because ``error`` holds an exception.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    succeeded: bool
    value: R | None = None
    error: BaseException | None = None
    elapsed_seconds: float = Field(ge=0)
    attempts: int = Field(default=1, ge=1)

    @model_validator(mode="after")
    def _check_outcome(self) -> Self:
        if self.succeeded and self.error is not None:
            raise ValueError("a successful TaskResult cannot carry an error")
        if not self.succeeded and self.error is None:
            raise ValueError("a failed TaskResult must carry an error")
        return self

    @classmethod
    def success(
        cls, value: Any, elapsed_seconds: float, attempts: int = 1
    ) -> "TaskResult[Any]":
        return cls(
            succeeded=True,
            value=value,
            elapsed_seconds=elapsed_seconds,
            attempts=attempts,
        )

    @classmethod
    def failure(
        cls, error: BaseException, elapsed_seconds: float, attempts: int = 1
    ) -> "TaskResult[Any]":
        return cls(
            succeeded=False,
            error=error,
            elapsed_seconds=elapsed_seconds,
            attempts=attempts,
        )

    def unwrap(self) -> R:
        """Return the value, or re-raise the recorded error."""
        if not self.succeeded:
            assert self.error is not None
            raise self.error
        return self.value  # type: ignore[return-value]
