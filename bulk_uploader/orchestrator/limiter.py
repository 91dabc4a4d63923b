"""Concurrency limiting for upload tasks."""
import asyncio
from typing import Any, Awaitable, Callable, Optional, TypeVar

T = TypeVar("T")


class ConcurrencyLimiter:
    """
    Admit at most ``limit`` task bodies at once.

    Each submission becomes an asyncio task that waits on a shared semaphore;
    waiters are woken in the order they started waiting, so queued work starts
    in submission order. The slot is held by ``async with`` around the body and
    released however the body exits.

    Usage:
        limiter = ConcurrencyLimiter(4)
        tasks = [limiter.submit(upload, path) for path in paths]
        results = await asyncio.gather(*tasks)
    """

    def __init__(self, limit: int):
        if limit < 1:
            raise ValueError(f"concurrency limit must be >= 1, got {limit}")
        self._limit = limit
        self._semaphore: Optional[asyncio.Semaphore] = None
        self._active = 0
        self._pending = 0

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def active(self) -> int:
        """Task bodies currently running."""
        return self._active

    @property
    def pending(self) -> int:
        """Submissions waiting for a slot."""
        return self._pending

    def submit(
        self,
        func: Callable[..., Awaitable[T]],
        *args: Any,
        **kwargs: Any,
    ) -> "asyncio.Task[T]":
        """
        Schedule ``func(*args, **kwargs)`` behind the limiter.

        Must be called from a running event loop. The returned task resolves
        with the body's result or raises the body's exception unchanged.
        """
        if self._semaphore is None:
            # created lazily so the semaphore binds to the running loop
            self._semaphore = asyncio.Semaphore(self._limit)
        self._pending += 1
        return asyncio.create_task(self._run(func, args, kwargs))

    async def _run(self, func, args, kwargs):
        try:
            await self._semaphore.acquire()
        finally:
            self._pending -= 1
        self._active += 1
        try:
            return await func(*args, **kwargs)
        finally:
            self._active -= 1
            self._semaphore.release()
