"""Tests for TaskQueue."""

import asyncio

from bounded_tasks.config.domain.queue import QueueConfig
from bounded_tasks.core.clock import sleep
from bounded_tasks.core.errors import TimeoutExceededError
from bounded_tasks.queue.application.queue import TaskQueue, create_task_queue
from bounded_tasks.queue.domain.state import QueueState
from bounded_tasks.runner.domain.task import Task
from tests.queue.fake_observer import FakeQueueObserver


class Recorder:
    """Builds tasks that log their start and track how many run at once."""

    def __init__(self) -> None:
        self.started: list[str] = []
        self.in_flight = 0
        self.peak = 0

    def task(self, name: str, seconds: float = 0.0) -> Task[str]:
        async def run() -> str:
            self.started.append(name)
            self.in_flight += 1
            self.peak = max(self.peak, self.in_flight)
            try:
                await sleep(seconds)
            finally:
                self.in_flight -= 1
            return name

        return run


def _make_queue(**config: object) -> tuple[TaskQueue[str], FakeQueueObserver]:
    observer = FakeQueueObserver()
    return TaskQueue(config=QueueConfig(**config), observer=observer), observer  # type: ignore[arg-type]


class TestTaskQueueProcess:
    async def test_returns_results_in_submission_order(self) -> None:
        queue, _ = _make_queue(concurrency=3)
        recorder = Recorder()
        for name, seconds in [("a", 0.03), ("b", 0.01), ("c", 0.02), ("d", 0.0)]:
            queue.add(recorder.task(name, seconds))

        results = await queue.process()

        assert [result.value for result in results] == ["a", "b", "c", "d"]

    async def test_respects_concurrency(self) -> None:
        queue, _ = _make_queue(concurrency=2)
        recorder = Recorder()
        for index in range(7):
            queue.add(recorder.task(f"t{index}", 0.005))

        await queue.process()

        assert recorder.peak == 2
        assert recorder.started == [f"t{index}" for index in range(7)]

    async def test_process_on_empty_queue_returns_immediately(self) -> None:
        queue, _ = _make_queue()

        assert await asyncio.wait_for(queue.process(), timeout=1.0) == []

    async def test_tasks_do_not_start_before_process_without_auto_start(self) -> None:
        queue, _ = _make_queue()
        recorder = Recorder()

        queue.add(recorder.task("a"))
        await sleep(0.01)

        assert recorder.started == []
        assert queue.size == 1

    async def test_queue_is_reusable_and_accumulates_results(self) -> None:
        queue, _ = _make_queue()
        recorder = Recorder()

        queue.add(recorder.task("first"))
        await queue.process()
        queue.add(recorder.task("second"))
        results = await queue.process()

        assert [result.value for result in results] == ["first", "second"]

    async def test_tasks_added_while_draining_are_picked_up(self) -> None:
        queue, _ = _make_queue(concurrency=1)
        recorder = Recorder()

        async def spawner() -> str:
            queue.add(recorder.task("late"))
            return "spawner"

        queue.add(spawner)
        results = await queue.process()

        assert [result.value for result in results] == ["spawner", "late"]


class TestTaskQueueAutoStart:
    async def test_add_starts_task_immediately(self) -> None:
        queue, _ = _make_queue(auto_start=True)
        recorder = Recorder()

        queue.add(recorder.task("a", 0.01))
        await sleep(0)

        assert recorder.started == ["a"]
        assert queue.is_running is True

    async def test_auto_start_still_bounded(self) -> None:
        queue, _ = _make_queue(auto_start=True, concurrency=2)
        recorder = Recorder()

        for index in range(5):
            queue.add(recorder.task(f"t{index}", 0.01))

        assert queue.in_flight == 2
        assert queue.size == 3
        results = await queue.process()
        assert len(results) == 5
        assert recorder.peak == 2


class TestTaskQueueState:
    async def test_state_transitions(self) -> None:
        queue, _ = _make_queue()
        recorder = Recorder()
        assert queue.state is QueueState.IDLE

        queue.add(recorder.task("a", 0.01))
        assert queue.state is QueueState.DRAINING

        await queue.process()
        assert queue.state is QueueState.IDLE
        assert queue.size == 0
        assert queue.in_flight == 0
        assert queue.is_running is False

    async def test_drained_event_reports_counts(self) -> None:
        queue, observer = _make_queue()

        async def broken() -> str:
            raise ValueError("nope")

        queue.add(Recorder().task("a"))
        queue.add(broken)
        await queue.process()

        assert observer.drained[-1].completed == 2
        assert observer.drained[-1].failed == 1
        assert [event.sequence for event in observer.enqueued] == [0, 1]


class TestTaskQueueFailures:
    async def test_failure_recorded_and_reported(self) -> None:
        queue, observer = _make_queue()
        recorder = Recorder()

        async def broken() -> str:
            raise RuntimeError("queue task broke")

        queue.add(recorder.task("a"))
        queue.add(broken)
        queue.add(recorder.task("c"))
        results = await queue.process()

        assert [result.succeeded for result in results] == [True, False, True]
        assert isinstance(results[1].error, RuntimeError)
        assert observer.failed[0].sequence == 1
        assert observer.failed[0].reason == "queue task broke"

    async def test_per_task_timeout(self) -> None:
        queue, observer = _make_queue(timeout_seconds=0.02)
        recorder = Recorder()

        queue.add(recorder.task("slow", 1.0))
        queue.add(recorder.task("fast"))
        results = await queue.process()

        assert isinstance(results[0].error, TimeoutExceededError)
        assert results[1].value == "fast"
        assert len(observer.failed) == 1

    async def test_task_ending_cancelled_recorded_as_failure(self) -> None:
        queue, observer = _make_queue()
        recorder = Recorder()

        async def interrupted() -> str:
            inner: asyncio.Future[str] = asyncio.get_running_loop().create_future()
            inner.cancel()
            return await inner

        queue.add(recorder.task("a"))
        queue.add(interrupted)
        queue.add(recorder.task("c"))
        results = await queue.process()

        assert [result.succeeded for result in results] == [True, False, True]
        assert isinstance(results[1].error, asyncio.CancelledError)
        assert [event.sequence for event in observer.failed] == [1]
        assert observer.drained[-1].completed == 3
        assert observer.drained[-1].failed == 1

    async def test_cancel_on_timeout_cancels_the_late_task(self) -> None:
        queue, _ = _make_queue(timeout_seconds=0.02, cancel_on_timeout=True)
        finished: list[str] = []

        async def slow() -> str:
            await sleep(0.1)
            finished.append("slow")
            return "slow"

        queue.add(slow)
        results = await queue.process()
        await sleep(0.15)

        assert isinstance(results[0].error, TimeoutExceededError)
        assert finished == []


class TestTaskQueueClear:
    async def test_clear_drops_pending_tasks(self) -> None:
        queue, observer = _make_queue()
        recorder = Recorder()
        queue.add(recorder.task("a"))
        queue.add(recorder.task("b"))

        queue.clear()
        results = await queue.process()

        assert results == []
        assert recorder.started == []
        assert observer.cleared[0].dropped_pending == 2
        assert queue.state is QueueState.IDLE

    async def test_clear_discards_accumulated_results(self) -> None:
        queue, _ = _make_queue()
        queue.add(Recorder().task("a"))
        await queue.process()

        queue.clear()
        queue.add(Recorder().task("b"))
        results = await queue.process()

        assert [result.value for result in results] == ["b"]

    async def test_running_task_keeps_slot_and_result_discarded(self) -> None:
        queue, observer = _make_queue(concurrency=1)
        recorder = Recorder()

        queue.add(recorder.task("stale", 0.05))
        first_process = asyncio.ensure_future(queue.process())
        await sleep(0.01)

        queue.clear()
        assert await asyncio.wait_for(first_process, timeout=1.0) == []
        assert queue.in_flight == 1
        assert observer.cleared[0].running_discarded == 1

        queue.add(recorder.task("fresh"))
        results = await queue.process()

        assert [result.value for result in results] == ["fresh"]
        assert recorder.started == ["stale", "fresh"]
        assert recorder.peak == 1


class TestCreateTaskQueue:
    def test_returns_queue_with_default_config(self) -> None:
        queue = create_task_queue(observer=FakeQueueObserver())

        assert isinstance(queue, TaskQueue)
        assert queue.config == QueueConfig()
        assert queue.state is QueueState.IDLE
