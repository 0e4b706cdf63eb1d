"""ProgressRunnerObserver — renders a Rich done/in-flight/remaining bar to stderr."""

from __future__ import annotations

from rich.console import Console, Group
from rich.live import Live
from rich.progress import (
    Progress,
    ProgressColumn,
    Task,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)
from rich.text import Text


class _CountsColumn(ProgressColumn):
    """Renders done+inflight/total with colors matching the bar segments."""

    def render(self, task: Task) -> Text:
        done = int(task.fields.get("done", 0))
        inflight = int(task.fields.get("inflight", 0))
        total = "?" if task.total is None else str(int(task.total))
        return Text.assemble(
            (str(done), "bright_green"),
            ("+", "dim white"),
            (str(inflight), "grey50"),
            ("/", "dim white"),
            (total, "default"),
        )


class _FailedColumn(ProgressColumn):
    """Shows the failure count once at least one task has failed."""

    def render(self, task: Task) -> Text:
        failed = int(task.fields.get("failed", 0))
        if failed == 0:
            return Text("")
        return Text(f"{failed} failed", style="red")


# (glyph, style, legend label) for the done, in-flight and not-started segments.
_SEGMENTS: tuple[tuple[str, str, str], ...] = (
    ("█", "bright_green", "done"),
    ("▒", "grey50", "in-flight"),
    ("░", "dim white", "remaining"),
)


def _segment_widths(
    done: int, inflight: int, total: float | None, width: int
) -> tuple[int, int, int]:
    """Split ``width`` cells into done / in-flight / not-started counts.

    An unknown or zero total (a lazy task stream) renders as all not-started.
    """
    if not total:
        return 0, 0, width
    done_cells = min(int(done / total * width), width)
    inflight_cells = min(int(inflight / total * width), width - done_cells)
    return done_cells, inflight_cells, width - done_cells - inflight_cells


class _RunBarColumn(ProgressColumn):
    def __init__(self, width: int = 40) -> None:
        super().__init__()
        self.width = width

    def render(self, task: Task) -> Text:
        widths = _segment_widths(
            done=int(task.completed),
            inflight=int(task.fields.get("inflight", 0)),
            total=task.total,
            width=self.width,
        )
        bar = Text()
        for (glyph, style, _), cells in zip(_SEGMENTS, widths):
            bar.append(glyph * cells, style=style)
        return bar


def _legend() -> Text:
    legend = Text("  Legend:  ")
    for glyph, style, label in _SEGMENTS:
        legend.append(glyph, style=style)
        legend.append(f" {label}  ")
    return legend


def _make_progress(console: Console) -> Progress:
    return Progress(
        TextColumn("{task.description}"),
        _RunBarColumn(),
        _CountsColumn(),
        TimeElapsedColumn(),
        _FailedColumn(),
        console=console,
        refresh_per_second=10,
        transient=False,
    )


class ProgressRunnerObserver:
    """Renders one Rich progress bar per run on stderr.

    The bar has three segments: finished tasks, tasks currently in flight, and
    tasks not yet started. Counters are kept even when ``disabled=True`` so
    tests can assert on them without any terminal output.

    Does NOT inherit from RunnerObserver (structural typing via Protocol).
    """

    def __init__(self, disabled: bool = False, description: str = "Tasks") -> None:
        self._disabled = disabled
        self._description = description
        self._total: int | None = None
        self._done = 0
        self._inflight = 0
        self._failed = 0
        self._peak_inflight = 0
        self._progress: Progress | None = None
        self._task_id: TaskID | None = None
        self._live: Live | None = None

    @property
    def done(self) -> int:
        return self._done

    @property
    def in_flight(self) -> int:
        return self._inflight

    @property
    def failed(self) -> int:
        return self._failed

    @property
    def peak_in_flight(self) -> int:
        return self._peak_inflight

    def _update_task(self) -> None:
        if self._progress is None or self._task_id is None:
            return
        self._progress.update(
            self._task_id,
            completed=self._done,
            inflight=self._inflight,
            done=self._done,
            failed=self._failed,
        )

    def _stop(self) -> None:
        if self._live is not None:
            self._live.stop()
        self._progress = None
        self._task_id = None
        self._live = None

    def run_started(self, run_id: str, limit: int, total: int | None) -> None:
        # Reset state from any previous run.
        self._stop()
        self._total = total
        self._done = 0
        self._inflight = 0
        self._failed = 0
        self._peak_inflight = 0

        if self._disabled:
            return

        console = Console(stderr=True)
        self._progress = _make_progress(console=console)
        self._task_id = self._progress.add_task(
            description=f"[bold]{self._description}[/bold] (limit {limit})",
            total=None if total is None else float(total),
            inflight=0,
            done=0,
            failed=0,
        )
        self._live = Live(
            Group(self._progress, Text(""), _legend()),
            console=console,
            refresh_per_second=10,
        )
        self._live.start()

    def task_started(self, run_id: str, index: int, in_flight: int) -> None:
        self._inflight += 1
        self._peak_inflight = max(self._peak_inflight, self._inflight)
        if not self._disabled:
            self._update_task()

    def task_succeeded(self, run_id: str, index: int, elapsed_seconds: float) -> None:
        self._done += 1
        self._inflight = max(0, self._inflight - 1)
        if not self._disabled:
            self._update_task()

    def task_failed(
        self, run_id: str, index: int, reason: str, elapsed_seconds: float
    ) -> None:
        self._done += 1
        self._failed += 1
        self._inflight = max(0, self._inflight - 1)
        if not self._disabled:
            self._update_task()

    def run_completed(
        self, run_id: str, total: int, failed: int, elapsed_seconds: float
    ) -> None:
        self._stop()

    def run_aborted(self, run_id: str, index: int, reason: str) -> None:
        self._stop()
