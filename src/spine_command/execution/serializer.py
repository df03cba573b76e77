"""Log Write Serializer — process-wide FIFO gate for log-file appends.

WHY
───
Many commands, and many concurrent runs of the same command, log at the
same time. A pretty-printed log record is several lines long; two appends
that interleave corrupt the record stream. Routing every append through
one ordered, single-slot queue removes the need for per-file locks.

ARCHITECTURE
────────────
::

    LogWriteSerializer(max_concurrency=1)
      ├── .schedule(task)   ─ wait for the slot, run task(), hand slot on
      └── .stats()          ─ submitted / completed / failed / pending

    schedule() ──► free slot & nobody waiting? ──yes──► run now
                        │ no
                        ▼
                  waiters (deque, FIFO) ──► woken by the task ahead of it
                                             on release; slot handed over
                                             directly, never re-contended

    get_log_serializer()  ─ the one process-wide instance (lazy, no teardown)

BEST PRACTICES
──────────────
- Keep tasks short: one append per task. Everything queued behind it waits.
- A failed task raises to its own caller only; the slot is released in a
  ``finally`` so the queue never jams.

Related modules:
    command/run_logger.py  — submits one task per log call

Example::

    serializer = get_log_serializer()
    await serializer.schedule(lambda: append_text(path, record))
"""

from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from spine_command.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class LogWriteSerializer:
    """Ordered task queue with a fixed degree of parallelism.

    Tasks start in submission order. With ``max_concurrency=1`` (the
    process-wide default) no two tasks ever overlap.

    Parameters
    ----------
    max_concurrency : int
        Number of tasks allowed to run at once (default 1).
    """

    def __init__(self, max_concurrency: int = 1) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
        self._max_concurrency = max_concurrency
        self._active = 0
        self._waiters: deque[asyncio.Future[None]] = deque()
        self._submitted = 0
        self._completed = 0
        self._failed = 0

    @property
    def max_concurrency(self) -> int:
        return self._max_concurrency

    async def schedule(self, task: Callable[[], Awaitable[T]]) -> T:
        """Run ``task`` once the queue admits it.

        Args:
            task: Zero-argument callable returning an awaitable.

        Returns:
            Whatever the task's awaitable returns.

        Raises:
            Whatever the task raises; later tasks are unaffected.
        """
        self._submitted += 1
        await self._acquire()
        try:
            result = await task()
        except BaseException as e:
            self._failed += 1
            logger.debug("log_serializer.task_failed", error=repr(e))
            raise
        finally:
            self._release()
        self._completed += 1
        return result

    async def _acquire(self) -> None:
        if self._active < self._max_concurrency and not self._waiters:
            self._active += 1
            return

        waiter: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        try:
            await waiter
        except asyncio.CancelledError:
            if waiter.done() and not waiter.cancelled():
                # Slot was handed to us in the same tick we were cancelled.
                self._release()
            elif waiter in self._waiters:
                self._waiters.remove(waiter)
            raise

    def _release(self) -> None:
        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                waiter.set_result(None)
                return
        self._active -= 1

    def stats(self) -> dict[str, Any]:
        """Counters for logging / debugging."""
        return {
            "max_concurrency": self._max_concurrency,
            "active": self._active,
            "pending": sum(1 for w in self._waiters if not w.done()),
            "submitted": self._submitted,
            "completed": self._completed,
            "failed": self._failed,
        }


# Process-wide serializer shared by every command and every run
_log_serializer: LogWriteSerializer | None = None


def get_log_serializer() -> LogWriteSerializer:
    """Get the process-wide log write serializer, creating it on first use."""
    global _log_serializer
    if _log_serializer is None:
        _log_serializer = LogWriteSerializer(max_concurrency=1)
    return _log_serializer


def reset_log_serializer() -> LogWriteSerializer:
    """Replace the process-wide serializer with a fresh one (test isolation)."""
    global _log_serializer
    _log_serializer = LogWriteSerializer(max_concurrency=1)
    return _log_serializer


__all__ = [
    "LogWriteSerializer",
    "get_log_serializer",
    "reset_log_serializer",
]
