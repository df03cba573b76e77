"""Run Logger — the leveled logger handed to command logic.

Every ``debug/info/warn/error`` call becomes one task on the process-wide
:class:`~spine_command.execution.serializer.LogWriteSerializer`. Inside
that task the record is appended to the run's ``.log.json`` file and then
forwarded to the command's sink, so the file sees records in exactly the
order the serializer admitted them.

The task is submitted when the method is called, not when its result is
awaited. Logic may fire a log call and move on; ``drain()`` waits for
every such call before the log is closed.

Record shape (pretty-printed, followed by ``,\\n``)::

    {
      "level": "info",
      "timestamp": "2026-10-18T04:41:00.123Z",
      "message": "input",
      "metadata": {"input": {"value": 21}}
    },

The log file is framed by ``[\\n`` (``open``) and ``]\\n`` (``close``). Those
two writes are direct appends and do not go through the serializer. The
last record keeps its trailing comma.
"""

from __future__ import annotations

import asyncio
import inspect
from pathlib import Path
from typing import Any

from spine_command.core.logging import get_logger
from spine_command.core.protocols import LogLevel, LogMethods
from spine_command.core.serialization import dumps_pretty
from spine_command.core.timestamps import to_iso8601_z, utc_now
from spine_command.execution.serializer import LogWriteSerializer

from .files import append_text

logger = get_logger(__name__)

LOG_OPEN = "[\n"
LOG_CLOSE = "]\n"


def render_record(level: LogLevel, message: str, metadata: Any) -> str:
    """Render one log record as it is appended to the file.

    Metadata that JSON cannot hold (non-string keys, cycles, runaway
    nesting) is recorded as its ``repr()`` instead.
    """
    record = {
        "level": level,
        "timestamp": to_iso8601_z(utc_now()),
        "message": message,
        "metadata": metadata,
    }
    try:
        rendered = dumps_pretty(record, strict=False)
    except (TypeError, ValueError, RecursionError):
        rendered = dumps_pretty({**record, "metadata": repr(metadata)}, strict=False)
    return f"{rendered},\n"


class RunLogger:
    """``LogMethods`` implementation bound to one run's log file.

    Each level method returns the queued write as an ``asyncio.Task``.
    Awaiting it surfaces file append failures to the caller.
    """

    def __init__(self, sink: LogMethods, log_path: Path, serializer: LogWriteSerializer) -> None:
        self._sink = sink
        self._path = log_path
        self._serializer = serializer
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def pending(self) -> int:
        """Number of queued writes that have not finished yet."""
        return len(self._pending)

    async def open(self) -> None:
        await append_text(self._path, LOG_OPEN)

    async def close(self) -> None:
        await append_text(self._path, LOG_CLOSE)

    def debug(self, message: str, metadata: Any = None) -> asyncio.Task[None]:
        return self._log("debug", message, metadata)

    def info(self, message: str, metadata: Any = None) -> asyncio.Task[None]:
        return self._log("info", message, metadata)

    def warn(self, message: str, metadata: Any = None) -> asyncio.Task[None]:
        return self._log("warn", message, metadata)

    def error(self, message: str, metadata: Any = None) -> asyncio.Task[None]:
        return self._log("error", message, metadata)

    async def drain(self) -> None:
        """Wait until every queued write of this logger has finished."""
        while self._pending:
            await asyncio.wait(list(self._pending))

    def _log(self, level: LogLevel, message: str, metadata: Any) -> asyncio.Task[None]:
        async def write() -> None:
            await append_text(self._path, render_record(level, message, metadata))
            await self._forward(level, message, metadata)

        task = asyncio.create_task(self._serializer.schedule(write))
        self._pending.add(task)
        task.add_done_callback(self._finished)
        return task

    def _finished(self, task: asyncio.Task[None]) -> None:
        # A write the logic never awaited still has to be reported.
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.warning(
                "command.log_write_failed",
                log_file=str(self._path),
                error=repr(error),
            )

    async def _forward(self, level: LogLevel, message: str, metadata: Any) -> None:
        # The record is already on disk; a broken sink must not abort the run.
        try:
            result = getattr(self._sink, level)(message, metadata)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.warning(
                "command.log_sink_failed",
                level=level,
                log_message=message,
                log_file=str(self._path),
                error=repr(e),
            )
