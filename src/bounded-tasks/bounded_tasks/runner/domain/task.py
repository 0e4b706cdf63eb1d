"""Task — the zero-argument unit of deferred work every runner consumes."""

from collections.abc import Awaitable, Callable

type Task[R] = Callable[[], Awaitable[R]]
