"""Tests for abandoning futures and forwarding their outcomes."""

import asyncio

import pytest

from bounded_tasks.core.futures import (
    abandon,
    abandoned_count,
    cancel_requested,
    forward_outcome,
)


class TestAbandon:
    async def test_abandoned_future_keeps_running_to_completion(self) -> None:
        finished = asyncio.Event()

        async def work() -> None:
            await asyncio.sleep(0.02)
            finished.set()

        abandon(asyncio.ensure_future(work()))

        await asyncio.wait_for(finished.wait(), timeout=1.0)

    async def test_abandoned_future_is_tracked_until_settled(self) -> None:
        gate = asyncio.Event()
        before = abandoned_count()

        async def work() -> None:
            await gate.wait()

        future = asyncio.ensure_future(work())
        abandon(future)
        assert abandoned_count() == before + 1

        gate.set()
        await future
        await asyncio.sleep(0)
        assert abandoned_count() == before

    async def test_abandoned_failure_is_retrieved(self) -> None:
        async def work() -> None:
            raise RuntimeError("ignored")

        future = asyncio.ensure_future(work())
        abandon(future)
        await asyncio.sleep(0.01)

        assert future.done()
        # Retrieval already happened; this just confirms the stored error.
        assert isinstance(future.exception(), RuntimeError)

    async def test_abandoning_settled_future_is_noop(self) -> None:
        future: asyncio.Future[int] = asyncio.get_running_loop().create_future()
        future.set_result(1)
        before = abandoned_count()

        abandon(future)

        assert abandoned_count() == before


class TestForwardOutcome:
    async def test_forwards_result(self) -> None:
        loop = asyncio.get_running_loop()
        source: asyncio.Future[int] = loop.create_future()
        target: asyncio.Future[int] = loop.create_future()
        source.set_result(7)

        forward_outcome(source, target)

        assert target.result() == 7

    async def test_forwards_exception(self) -> None:
        loop = asyncio.get_running_loop()
        source: asyncio.Future[int] = loop.create_future()
        target: asyncio.Future[int] = loop.create_future()
        source.set_exception(ValueError("bad"))

        forward_outcome(source, target)

        with pytest.raises(ValueError, match="bad"):
            target.result()

    async def test_forwards_cancellation(self) -> None:
        loop = asyncio.get_running_loop()
        source: asyncio.Future[int] = loop.create_future()
        target: asyncio.Future[int] = loop.create_future()
        source.cancel()

        forward_outcome(source, target)

        assert target.cancelled()

    async def test_settled_target_is_left_alone(self) -> None:
        loop = asyncio.get_running_loop()
        source: asyncio.Future[int] = loop.create_future()
        target: asyncio.Future[int] = loop.create_future()
        target.set_result(1)
        source.set_result(2)

        forward_outcome(source, target)

        assert target.result() == 1


class TestCancelRequested:
    async def test_false_while_running_normally(self) -> None:
        assert cancel_requested() is False

    async def test_true_inside_task_being_cancelled(self) -> None:
        seen: list[bool] = []

        async def body() -> None:
            try:
                await asyncio.sleep(1.0)
            except asyncio.CancelledError:
                seen.append(cancel_requested())
                raise

        task = asyncio.ensure_future(body())
        await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert seen == [True]

    async def test_false_when_awaited_future_was_cancelled(self) -> None:
        inner: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        inner.cancel()

        with pytest.raises(asyncio.CancelledError):
            await inner

        assert cancel_requested() is False
