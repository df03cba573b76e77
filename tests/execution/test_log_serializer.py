"""
Tests for spine_command.execution.serializer.

Tests cover:
- At most one task runs at a time
- Tasks start in submission order
- A failing task does not jam the queue
- Cancelled waiters leave the queue
- Process-wide instance management
"""

import asyncio

import pytest

from spine_command.execution.serializer import (
    LogWriteSerializer,
    get_log_serializer,
    reset_log_serializer,
)


class TestLogWriteSerializer:
    @pytest.mark.asyncio
    async def test_returns_task_result(self):
        serializer = LogWriteSerializer()

        async def task():
            return 42

        assert await serializer.schedule(task) == 42

    @pytest.mark.asyncio
    async def test_never_overlaps(self):
        serializer = LogWriteSerializer()
        running = 0
        peak = 0

        async def task():
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            await asyncio.sleep(0.001)
            running -= 1

        await asyncio.gather(*(serializer.schedule(task) for _ in range(25)))
        assert peak == 1

    @pytest.mark.asyncio
    async def test_fifo_order(self):
        serializer = LogWriteSerializer()
        order: list[int] = []

        def make(i):
            async def task():
                await asyncio.sleep(0)
                order.append(i)
            return task

        await asyncio.gather(*(serializer.schedule(make(i)) for i in range(20)))
        assert order == list(range(20))

    @pytest.mark.asyncio
    async def test_failure_propagates_and_queue_continues(self):
        serializer = LogWriteSerializer()
        done: list[str] = []

        async def failing():
            raise OSError("disk full")

        async def ok():
            done.append("ok")
            return "ok"

        results = await asyncio.gather(
            serializer.schedule(failing),
            serializer.schedule(ok),
            serializer.schedule(ok),
            return_exceptions=True,
        )
        assert isinstance(results[0], OSError)
        assert results[1:] == ["ok", "ok"]
        assert done == ["ok", "ok"]

        stats = serializer.stats()
        assert stats["failed"] == 1
        assert stats["completed"] == 2
        assert stats["active"] == 0

    @pytest.mark.asyncio
    async def test_cancelled_waiter_is_skipped(self):
        serializer = LogWriteSerializer()
        gate = asyncio.Event()
        ran: list[str] = []

        async def blocker():
            await gate.wait()
            ran.append("blocker")

        async def record(name):
            ran.append(name)

        first = asyncio.create_task(serializer.schedule(blocker))
        await asyncio.sleep(0)
        cancelled = asyncio.create_task(serializer.schedule(lambda: record("cancelled")))
        last = asyncio.create_task(serializer.schedule(lambda: record("last")))
        await asyncio.sleep(0)

        cancelled.cancel()
        gate.set()
        await first
        await last
        with pytest.raises(asyncio.CancelledError):
            await cancelled

        assert ran == ["blocker", "last"]
        assert serializer.stats()["active"] == 0
        assert serializer.stats()["pending"] == 0

    @pytest.mark.asyncio
    async def test_higher_concurrency(self):
        serializer = LogWriteSerializer(max_concurrency=3)
        running = 0
        peak = 0

        async def task():
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            await asyncio.sleep(0.001)
            running -= 1

        await asyncio.gather(*(serializer.schedule(task) for _ in range(10)))
        assert peak == 3

    def test_rejects_zero_concurrency(self):
        with pytest.raises(ValueError):
            LogWriteSerializer(max_concurrency=0)


class TestProcessWideSerializer:
    def test_same_instance(self):
        assert get_log_serializer() is get_log_serializer()

    def test_single_slot(self):
        assert get_log_serializer().max_concurrency == 1

    def test_reset_replaces_instance(self):
        before = get_log_serializer()
        after = reset_log_serializer()
        assert after is not before
        assert get_log_serializer() is after
