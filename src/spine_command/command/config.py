"""Command configuration — the immutable half of a command definition.

A ``CommandConfig`` is built once, when a command is defined, and lives as
long as the wrapped callable. ``name`` and ``stage`` become path segments,
so they are validated as such; ``purpose`` is descriptive only and never
used in naming.

Example::

    config = CommandConfig(
        name="sync-prices",
        purpose="pull the latest vendor prices",
        stage="dev",
        log=StructlogSink.for_command("sync-prices"),
        base_dir=Path("/var/lib/jobs"),
    )
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from spine_command.core.errors import CommandConfigError
from spine_command.core.logging import get_logger
from spine_command.core.protocols import LogMethods
from spine_command.core.settings import CommandSettings, get_settings


class StructlogSink:
    """Adapts a structlog logger to the ``LogMethods`` contract.

    structlog treats extra positional arguments as %-format arguments, so
    metadata is passed under a ``metadata`` key instead.
    """

    def __init__(self, logger: Any) -> None:
        self._logger = logger

    @classmethod
    def for_command(cls, name: str, **context: Any) -> StructlogSink:
        return cls(get_logger("spine_command.run").bind(command=name, **context))

    def debug(self, message: str, metadata: Any = None) -> None:
        self._logger.debug(message, metadata=metadata)

    def info(self, message: str, metadata: Any = None) -> None:
        self._logger.info(message, metadata=metadata)

    def warn(self, message: str, metadata: Any = None) -> None:
        self._logger.warning(message, metadata=metadata)

    def error(self, message: str, metadata: Any = None) -> None:
        self._logger.error(message, metadata=metadata)


class CommandConfig(BaseModel):
    """Immutable configuration of one command.

    Attributes:
        name: Command name (path segment)
        purpose: Human-readable description, not used in naming
        stage: Stage label such as ``dev`` or ``prod`` (path segment)
        log: Leveled-log sink receiving every run log entry
        base_dir: Root directory for ``__tmp__/<stage>/<name>``
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    name: str
    purpose: str | None = None
    stage: str
    log: LogMethods
    base_dir: Path

    @field_validator("name", "stage")
    @classmethod
    def _check_path_segment(cls, value: str) -> str:
        if not value or value.strip() != value:
            raise ValueError("must be a non-empty string without surrounding whitespace")
        if "/" in value or "\\" in value or value in (".", ".."):
            raise ValueError(f"{value!r} is not a single path segment")
        return value

    @classmethod
    def from_settings(
        cls,
        name: str,
        *,
        purpose: str | None = None,
        log: LogMethods | None = None,
        settings: CommandSettings | None = None,
    ) -> CommandConfig:
        """Build a config whose stage and base_dir come from the environment.

        Raises:
            CommandConfigError: The resulting config is invalid
        """
        settings = settings or get_settings()
        try:
            return cls(
                name=name,
                purpose=purpose,
                stage=settings.stage,
                log=log or StructlogSink.for_command(name, stage=settings.stage),
                base_dir=settings.base_dir,
            )
        except ValueError as exc:
            raise CommandConfigError(
                f"Invalid command configuration for {name!r}: {exc}", cause=exc
            ).with_context(command=name, stage=settings.stage) from exc
