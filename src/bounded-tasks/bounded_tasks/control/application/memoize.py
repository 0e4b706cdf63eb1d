"""Result caching for async functions, with an optional time-to-live."""

import functools
import time
from collections.abc import Awaitable, Callable, Hashable
from typing import Any

from bounded_tasks.config.domain.defaults import DEFAULT_MEMOIZE_TTL_SECONDS

type KeyFn = Callable[..., Hashable]


def _default_key(*args: Any, **kwargs: Any) -> Hashable:
    return repr((args, sorted(kwargs.items())))


class MemoizedAsync[R]:
    """Callable wrapper returned by ``memoize_async``.

    Entries are stamped when the call starts and expire ``ttl_seconds`` later
    (five minutes by default; ``None`` keeps them until ``cache_clear``).
    Expired entries are swept whenever a new result is stored. Failed calls
    are not cached. Concurrent calls with the same key are not de-duplicated:
    each runs ``fn`` until one result is cached.
    """

    def __init__(
        self,
        fn: Callable[..., Awaitable[R]],
        key: KeyFn | None = None,
        ttl_seconds: float | None = DEFAULT_MEMOIZE_TTL_SECONDS,
    ) -> None:
        self._fn = fn
        self._key = key or _default_key
        self._ttl_seconds = ttl_seconds
        self._cache: dict[Hashable, tuple[R, float]] = {}
        functools.update_wrapper(self, fn)

    async def __call__(self, *args: Any, **kwargs: Any) -> R:
        cache_key = self._key(*args, **kwargs)
        now = time.monotonic()
        cached = self._cache.get(cache_key)
        if cached is not None:
            value, stored_at = cached
            if self._ttl_seconds is None or now - stored_at < self._ttl_seconds:
                return value

        value = await self._fn(*args, **kwargs)
        self._evict_expired(now=time.monotonic())
        self._cache[cache_key] = (value, now)
        return value

    def _evict_expired(self, now: float) -> None:
        if self._ttl_seconds is None:
            return
        expired = [
            cache_key
            for cache_key, (_, stored_at) in self._cache.items()
            if now - stored_at >= self._ttl_seconds
        ]
        for cache_key in expired:
            del self._cache[cache_key]

    @property
    def ttl_seconds(self) -> float | None:
        return self._ttl_seconds

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def cache_clear(self) -> None:
        self._cache.clear()


def memoize_async[R](
    fn: Callable[..., Awaitable[R]],
    key: KeyFn | None = None,
    ttl_seconds: float | None = DEFAULT_MEMOIZE_TTL_SECONDS,
) -> MemoizedAsync[R]:
    """Cache ``fn``'s results per key; ``key`` defaults to the repr of the arguments."""
    return MemoizedAsync(fn, key=key, ttl_seconds=ttl_seconds)
