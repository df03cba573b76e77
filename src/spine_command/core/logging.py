"""
Structured logging for spine-command.

Two kinds of logging happen around a command run, and they are kept apart:

- **Run log:** the per-run ``<prefix>.log.json`` file plus the caller's
  sink. Written by :class:`spine_command.command.run_logger.RunLogger`.
- **Process log:** this module. Lifecycle events of the package itself
  (``command.started``, ``command.failed``, ``log_serializer.task_failed``)
  emitted through structlog.

Architecture:
    ::

        configure_logging()   ← SPINE_COMMAND_LOG_LEVEL, SPINE_COMMAND_JSON_LOGS
              │
              ▼
        structlog processor chain:
          1. TimeStamper(fmt="iso")
          2. merge_contextvars        ← LogContext(command=..., run=...)
          3. add_log_level
          4. StackInfoRenderer / set_exc_info
          5. add_service_metadata
          6. JSONRenderer (not a tty) | ConsoleRenderer (tty)

Examples:
    >>> from spine_command.core.logging import configure_logging, get_logger
    >>> configure_logging(level="DEBUG", service="nightly-jobs")
    >>> logger = get_logger(__name__)
    >>> logger.info("command.started", command="double", stage="dev")

Tags:
    logging, structlog, observability, spine-command

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from spine_command.core.settings import get_settings

# Store service name for metadata
_SERVICE_NAME = "spine-command"


def _add_service_metadata(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add service-level metadata to all logs."""
    event_dict.setdefault("service", _SERVICE_NAME)
    return event_dict


def configure_logging(
    level: str | None = None,
    json_format: bool | None = None,
    service: str = "spine-command",
    add_timestamp: bool = True,
) -> None:
    """Configure structured logging for the process.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR); defaults to
            ``CommandSettings.log_level``
        json_format: True for JSON, False for console; defaults to
            ``CommandSettings.json_logs``, then to JSON when stdout is not a tty
        service: Service name to include in logs
        add_timestamp: Include ISO timestamp in logs
    """
    global _SERVICE_NAME
    _SERVICE_NAME = service

    settings = get_settings()
    if level is None:
        level = settings.log_level
    if json_format is None:
        json_format = settings.json_logs
    if json_format is None:
        json_format = not sys.stdout.isatty()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        _add_service_metadata,
    ]

    if add_timestamp:
        shared_processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_format:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper()),
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger.

    Args:
        name: Logger name (usually __name__)
    """
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind context to include in all subsequent logs of the current task."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context."""
    structlog.contextvars.clear_contextvars()


class LogContext:
    """Context manager for scoped logging context.

    Restores whatever was bound before on exit, so nested commands do not
    strip their caller's context.

    Example:
        async with LogContext(command="double", run="20261018.044100.ab12"):
            logger.info("command.started")
    """

    def __init__(self, **kwargs: Any):
        self._context = kwargs
        self._tokens: Any = None

    def __enter__(self) -> LogContext:
        self._tokens = structlog.contextvars.bind_contextvars(**self._context)
        return self

    def __exit__(self, *args: Any) -> None:
        structlog.contextvars.reset_contextvars(**self._tokens)

    async def __aenter__(self) -> LogContext:
        return self.__enter__()

    async def __aexit__(self, *args: Any) -> None:
        self.__exit__(*args)


__all__ = [
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "LogContext",
]
