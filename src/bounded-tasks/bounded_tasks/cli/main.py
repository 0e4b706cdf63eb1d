"""CLI entrypoint for bounded-tasks — typer app with `simulate` and `check-config`."""

import asyncio
import sys
import time
from pathlib import Path

import structlog
import typer

from bounded_tasks.config.domain.config import BoundedTasksConfig
from bounded_tasks.config.infrastructure.observer import StructlogConfigObserver
from bounded_tasks.config.infrastructure.yaml_loader import YamlConfigLoader
from bounded_tasks.core.clock import sleep
from bounded_tasks.core.errors import BoundedTasksError
from bounded_tasks.retry.application.retry import retry
from bounded_tasks.retry.domain.policy import RetryPolicy
from bounded_tasks.retry.infrastructure.observer import StructlogRetryObserver
from bounded_tasks.runner.application.runner import BoundedRunner
from bounded_tasks.runner.domain.observer import RunnerObserver
from bounded_tasks.runner.domain.result import TaskResult
from bounded_tasks.runner.domain.task import Task
from bounded_tasks.runner.infrastructure.composite_observer import (
    CompositeRunnerObserver,
)
from bounded_tasks.runner.infrastructure.observer import StructlogRunnerObserver
from bounded_tasks.runner.infrastructure.progress_observer import (
    ProgressRunnerObserver,
)

app = typer.Typer(add_completion=False)


class SimulatedTaskError(BoundedTasksError):
    """Raised by a simulated task that was told to fail."""

    def __init__(self, index: int) -> None:
        super().__init__(f"Failed to run simulated task {index}", retriable=True)


def _configure_structlog(log_format: str) -> None:
    """Configure structlog based on the requested format."""
    if log_format == "console":
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    elif log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        typer.echo(f"Invalid log format: {log_format!r}. Must be 'console' or 'json'.")
        raise typer.Exit(code=1)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(0),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
    )


def _load_config(config_path: Path | None) -> BoundedTasksConfig:
    if config_path is None:
        return BoundedTasksConfig()
    loader = YamlConfigLoader(observer=StructlogConfigObserver())
    return loader.load(path=config_path)


def _make_simulated_tasks(
    count: int,
    step_seconds: float,
    fail_every: int,
    retry_policy: RetryPolicy | None,
) -> list[Task[int]]:
    """Task i sleeps (count - i) steps and returns i.

    With ``fail_every`` = K, every K-th task fails on its first attempt only,
    so a retry policy with at least two attempts recovers it.
    """
    attempts: dict[int, int] = {}

    def make(index: int) -> Task[int]:
        async def attempt() -> int:
            attempts[index] = attempts.get(index, 0) + 1
            await sleep((count - index) * step_seconds)
            if fail_every and (index + 1) % fail_every == 0 and attempts[index] == 1:
                raise SimulatedTaskError(index=index)
            return index

        if retry_policy is None:
            return attempt

        async def with_retry() -> int:
            return await retry(
                attempt, policy=retry_policy, observer=StructlogRetryObserver()
            )

        return with_retry

    return [make(index) for index in range(count)]


def _print_summary(
    results: list[TaskResult[int]],
    limit: int,
    peak_in_flight: int,
    elapsed_seconds: float,
) -> None:
    failed = sum(1 for result in results if not result.succeeded)
    rows = [
        ("Tasks", str(len(results))),
        ("Succeeded", str(len(results) - failed)),
        ("Failed", str(failed)),
        ("Limit", str(limit)),
        ("Peak in-flight", str(peak_in_flight)),
        ("Elapsed", f"{elapsed_seconds:.2f}s"),
    ]
    label_w = max(len(label) for label, _ in rows)
    typer.echo("")
    for label, value in rows:
        typer.echo(f"  {label:<{label_w}}  {value}")


@app.command()
def simulate(
    tasks: int = typer.Option(10, "--tasks", min=0, help="Number of simulated tasks"),
    limit: int | None = typer.Option(
        None,
        "--limit",
        help="Maximum tasks in flight (defaults to the config's batch concurrency)",
    ),
    step_ms: int = typer.Option(
        10, "--step-ms", min=0, help="Task i sleeps (tasks - i) * step milliseconds"
    ),
    fail_every: int = typer.Option(
        0, "--fail-every", min=0, help="Make every Nth task fail once; 0 disables"
    ),
    use_retry: bool = typer.Option(
        False, "--retry/--no-retry", help="Wrap each task in the config's retry policy"
    ),
    timeout_seconds: float | None = typer.Option(
        None,
        "--timeout-seconds",
        help="Per-task timeout (defaults to the config's timeout section)",
    ),
    config_path: Path | None = typer.Option(
        None, "--config", help="Path to a bounded-tasks config YAML"
    ),
    log_format: str = typer.Option(
        "console",
        "--log-format",
        help="Log format: 'console' or 'json'",
    ),
    progress: bool = typer.Option(
        True, "--progress/--no-progress", help="Render a progress bar on stderr"
    ),
) -> None:
    """Run synthetic sleep tasks through the bounded runner and summarise the run."""
    try:
        _configure_structlog(log_format=log_format)
        try:
            config = _load_config(config_path=config_path)
        except BoundedTasksError as exc:
            typer.echo(str(exc))
            raise typer.Exit(code=1) from exc

        effective_limit = limit if limit is not None else config.batch.concurrency
        retry_policy = RetryPolicy.from_config(config.retry) if use_retry else None
        simulated = _make_simulated_tasks(
            count=tasks,
            step_seconds=step_ms / 1000,
            fail_every=fail_every,
            retry_policy=retry_policy,
        )

        progress_observer = ProgressRunnerObserver(
            disabled=not progress or log_format == "json", description="Simulated"
        )
        observers: list[RunnerObserver] = [StructlogRunnerObserver(), progress_observer]
        timeout_config = config.timeout
        if timeout_seconds is not None:
            timeout_config = timeout_config.model_copy(
                update={"timeout_seconds": timeout_seconds}
            )
        runner = BoundedRunner.from_config(
            limit=effective_limit,
            config=timeout_config,
            observer=CompositeRunnerObserver(observers=observers),
        )

        started_at = time.monotonic()
        results = asyncio.run(runner.run(simulated))
        elapsed_seconds = time.monotonic() - started_at

        _print_summary(
            results=results,
            limit=effective_limit,
            peak_in_flight=progress_observer.peak_in_flight,
            elapsed_seconds=elapsed_seconds,
        )

    except KeyboardInterrupt:
        typer.echo("Simulation interrupted.")
        sys.exit(1)
    except BoundedTasksError as exc:
        typer.echo(str(exc))
        sys.exit(1)


@app.command("check-config")
def check_config(
    config_path: Path = typer.Argument(..., help="Path to a bounded-tasks config YAML"),
    log_format: str = typer.Option(
        "console",
        "--log-format",
        help="Log format: 'console' or 'json'",
    ),
) -> None:
    """Load and validate a config file, then print the resolved config as JSON."""
    _configure_structlog(log_format=log_format)
    try:
        config = _load_config(config_path=config_path)
    except BoundedTasksError as exc:
        typer.echo(str(exc))
        raise typer.Exit(code=1) from exc
    typer.echo(config.model_dump_json(indent=2))


if __name__ == "__main__":
    app()
