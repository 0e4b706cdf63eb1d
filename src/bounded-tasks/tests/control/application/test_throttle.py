"""Tests for throttle_async."""

import asyncio

from bounded_tasks.control.application.throttle import throttle_async
from bounded_tasks.core.clock import sleep


class CallLog:
    def __init__(self) -> None:
        self.calls: list[tuple[str, float]] = []

    async def echo(self, value: str) -> str:
        self.calls.append((value, asyncio.get_running_loop().time()))
        return value


class TestThrottleAsync:
    async def test_first_call_runs_immediately(self) -> None:
        log = CallLog()
        throttled = throttle_async(log.echo, interval_seconds=1.0)
        loop = asyncio.get_running_loop()

        started_at = loop.time()
        assert await throttled("a") == "a"

        assert loop.time() - started_at < 0.05

    async def test_call_inside_interval_deferred_to_interval_end(self) -> None:
        log = CallLog()
        throttled = throttle_async(log.echo, interval_seconds=0.05)

        await throttled("a")
        assert await throttled("b") == "b"

        assert [value for value, _ in log.calls] == ["a", "b"]
        assert log.calls[1][1] - log.calls[0][1] >= 0.045

    async def test_calls_during_pending_share_one_invocation(self) -> None:
        log = CallLog()
        throttled = throttle_async(log.echo, interval_seconds=0.05)

        await throttled("a")
        results = await asyncio.gather(throttled("b"), throttled("c"), throttled("d"))

        assert results == ["b", "b", "b"]
        assert [value for value, _ in log.calls] == ["a", "b"]

    async def test_call_after_interval_runs_immediately(self) -> None:
        log = CallLog()
        throttled = throttle_async(log.echo, interval_seconds=0.02)

        await throttled("a")
        await sleep(0.03)
        loop = asyncio.get_running_loop()
        started_at = loop.time()
        await throttled("b")

        assert loop.time() - started_at < 0.015
        assert [value for value, _ in log.calls] == ["a", "b"]
