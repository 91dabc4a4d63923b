"""Tests for ConcurrencyLimiter."""
import asyncio

import pytest

from bulk_uploader.orchestrator.limiter import ConcurrencyLimiter


class TestConcurrencyLimiter:
    def test_rejects_zero_limit(self):
        with pytest.raises(ValueError):
            ConcurrencyLimiter(0)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit,count", [(1, 5), (3, 20), (8, 4)])
    async def test_never_exceeds_limit(self, limit, count):
        limiter = ConcurrencyLimiter(limit)
        running = 0
        peak = 0
        calls = []

        async def body(i):
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            assert limiter.active <= limit
            await asyncio.sleep(0.01)
            running -= 1
            calls.append(i)
            return i

        results = await asyncio.gather(*[limiter.submit(body, i) for i in range(count)])

        assert peak == min(limit, count)
        assert results == list(range(count))
        assert sorted(calls) == list(range(count))
        assert limiter.active == 0
        assert limiter.pending == 0

    @pytest.mark.asyncio
    async def test_queued_tasks_start_in_submission_order(self):
        limiter = ConcurrencyLimiter(2)
        started = []

        async def body(i):
            started.append(i)
            await asyncio.sleep(0.005)

        await asyncio.gather(*[limiter.submit(body, i) for i in range(10)])
        assert started == list(range(10))

    @pytest.mark.asyncio
    async def test_pending_counts_waiting_submissions(self):
        limiter = ConcurrencyLimiter(1)
        gate = asyncio.Event()

        async def body():
            await gate.wait()

        tasks = [limiter.submit(body) for _ in range(3)]
        await asyncio.sleep(0)
        assert limiter.active == 1
        assert limiter.pending == 2

        gate.set()
        await asyncio.gather(*tasks)
        assert limiter.active == 0
        assert limiter.pending == 0

    @pytest.mark.asyncio
    async def test_failing_body_releases_slot(self):
        limiter = ConcurrencyLimiter(1)

        async def boom():
            raise RuntimeError("boom")

        async def ok():
            return "ok"

        failing = limiter.submit(boom)
        following = limiter.submit(ok)

        with pytest.raises(RuntimeError, match="boom"):
            await failing
        assert await asyncio.wait_for(following, timeout=1) == "ok"
        assert limiter.active == 0

    @pytest.mark.asyncio
    async def test_passes_keyword_arguments(self):
        limiter = ConcurrencyLimiter(1)

        async def body(a, b=0):
            return a + b

        assert await limiter.submit(body, 1, b=2) == 3
