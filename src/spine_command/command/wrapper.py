"""Command Execution Wrapper — turn async logic into an observable command.

``as_command(config, logic)`` returns a callable that, for every input:

- names the run ``<YYYYMMDD.HHMMSS>.<sha256(input)>``
- creates ``<base_dir>/__tmp__/<stage>/<name>/``
- records the input, every log call, the result or the error in
  ``<prefix>.log.json``
- writes the result to ``<prefix>.out.json``
- hands back the logic's return value, or re-raises its exception, unchanged

Architecture:

    .. code-block:: text

        Command.__call__(input) lifecycle:

        ┌──────────────────────────────────────────────────┐
        │ 1. called_at = clock(); resolve_run()  Created    │
        │ 2. mkdir -p run directory        DirectoryEnsured │
        │ 3. append "[\\n"                         LogOpened │
        │ 4. log.info("input")                             │
        │ 5. ─── await logic(input, control) ─── Running    │
        │ 6a. log.info("output.result")                     │
        │     write <prefix>.out.json                       │
        │     log.info("output.files")         Succeeded    │
        │ 6b. log.error("output.error")        Failed       │
        │ 7. drain queued writes; append "]\\n"    LogClosed │
        │ 8. return output | re-raise   Returned | Rethrown │
        └──────────────────────────────────────────────────┘

Example:
    >>> @command(name="double", stage="dev", base_dir=tmp)
    ... async def double(input, control):
    ...     await control.log.info("doubling", {"value": input["value"]})
    ...     return {"doubled": input["value"] * 2}
    >>>
    >>> await double({"value": 21})
    {'doubled': 42}

Tags:
    spine-command, execution, observability, run-directory, decorator

Doc-Types:
    api-reference
"""

from __future__ import annotations

import functools
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Generic, TypeVar

from spine_command.core.errors import error_metadata, is_error_like
from spine_command.core.logging import LogContext, get_logger
from spine_command.core.protocols import LogMethods
from spine_command.core.settings import get_settings
from spine_command.core.timestamps import utc_now
from spine_command.execution.serializer import LogWriteSerializer, get_log_serializer

from .config import CommandConfig, StructlogSink
from .files import ensure_directory
from .output import OutputWriter
from .resolver import RunLocation, resolve_run
from .run_logger import RunLogger

logger = get_logger(__name__)

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


@dataclass(frozen=True)
class CommandControl:
    """Control surface injected into command logic.

    .. code-block:: text

        CommandControl
        ├── .log   → debug / info / warn / error (awaitable)
        ├── .out   → await out.write(name=..., data=...)
        └── .run   → RunLocation (directory, file_prefix, paths)
    """

    log: RunLogger
    out: OutputWriter
    run: RunLocation


Logic = Callable[[InputT, CommandControl], Awaitable[OutputT]]


class Command(Generic[InputT, OutputT]):
    """A wrapped command. Await it with the logic's input."""

    def __init__(
        self,
        config: CommandConfig,
        logic: Logic,
        *,
        serializer: LogWriteSerializer | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.config = config
        self.logic = logic
        self._serializer = serializer
        self._clock = clock
        functools.update_wrapper(self, logic)

    def __repr__(self) -> str:
        return f"Command(name={self.config.name!r}, stage={self.config.stage!r})"

    async def __call__(self, input: InputT) -> OutputT:
        called_at = self._clock()
        location = resolve_run(self.config, input, called_at)

        await ensure_directory(location.directory)

        run_log = RunLogger(
            self.config.log,
            location.log_path,
            self._serializer or get_log_serializer(),
        )
        out = OutputWriter(location)
        await run_log.open()

        async with LogContext(
            command=self.config.name,
            stage=self.config.stage,
            run=location.file_prefix,
        ):
            started = time.perf_counter()
            logger.debug("command.started", log_file=str(location.log_path))
            failure: BaseException | None = None
            try:
                output = await self._run(input, run_log, out, location)
                logger.info(
                    "command.completed",
                    duration_ms=round((time.perf_counter() - started) * 1000, 2),
                    artifacts=len(out.written),
                )
                return output
            except BaseException as exc:
                failure = exc
                if is_error_like(exc):
                    await self._log_failure(run_log, exc)
                logger.warning(
                    "command.failed",
                    duration_ms=round((time.perf_counter() - started) * 1000, 2),
                    error=repr(exc),
                )
                raise
            finally:
                await self._close_log(run_log, failure)

    async def _run(
        self, input: InputT, run_log: RunLogger, out: OutputWriter, location: RunLocation
    ) -> OutputT:
        await run_log.info("input", {"input": input})

        output = await self.logic(input, CommandControl(log=run_log, out=out, run=location))

        await run_log.info("output.result", {"output": output})
        await out.write_primary(output)
        await run_log.info(
            "output.files",
            {"log": str(location.log_path), "out": str(location.output_path)},
        )
        return output

    async def _log_failure(self, run_log: RunLogger, error: Exception) -> None:
        # The caller must see the original error, even if recording it fails.
        try:
            await run_log.error("output.error", {"error": error_metadata(error)})
        except Exception as log_exc:
            logger.warning("command.error_log_failed", error=repr(log_exc))

    async def _close_log(self, run_log: RunLogger, failure: BaseException | None) -> None:
        await run_log.drain()
        try:
            await run_log.close()
        except OSError as close_exc:
            if failure is None:
                raise
            logger.warning("command.log_close_failed", error=repr(close_exc))


def as_command(
    config: CommandConfig,
    logic: Logic,
    *,
    serializer: LogWriteSerializer | None = None,
    clock: Callable[[], datetime] = utc_now,
) -> Command:
    """Wrap ``logic`` into a command.

    Args:
        config: Command configuration
        logic: ``async (input, control) -> output``
        serializer: Log write serializer; defaults to the process-wide one
        clock: Source of the invocation start time

    Returns:
        An awaitable ``Command``; ``await cmd(input)`` runs one invocation.
    """
    return Command(config, logic, serializer=serializer, clock=clock)


def command(
    name: str,
    *,
    stage: str | None = None,
    log: LogMethods | None = None,
    base_dir: Path | str | None = None,
    purpose: str | None = None,
    serializer: LogWriteSerializer | None = None,
    clock: Callable[[], datetime] = utc_now,
) -> Callable[[Logic], Command]:
    """Decorator form of :func:`as_command`.

    ``stage`` and ``base_dir`` default to ``CommandSettings``; ``log``
    defaults to a structlog sink bound to the command name.

    Example::

        @command(name="sync-prices", stage="dev")
        async def sync_prices(input, control):
            ...
    """

    def decorator(logic: Logic) -> Command:
        settings = get_settings()
        resolved_stage = stage if stage is not None else settings.stage
        config = CommandConfig(
            name=name,
            purpose=purpose,
            stage=resolved_stage,
            log=log or StructlogSink.for_command(name, stage=resolved_stage),
            base_dir=Path(base_dir) if base_dir is not None else settings.base_dir,
        )
        return as_command(config, logic, serializer=serializer, clock=clock)

    return decorator


__all__ = [
    "Command",
    "CommandControl",
    "as_command",
    "command",
]
