"""
Protocol definitions for spine-command.

Protocols define contracts without inheritance. Any object with the right
method shapes satisfies them: a structlog adapter, a test recorder, a
``MagicMock``, or the run logger handed to command logic.

Architecture:
    ::

        LogMethods   — leveled logging contract {debug, info, warn, error}
          ├── StructlogSink   (command.config)   console / telemetry sink
          └── RunLogger       (command.run_logger) per-run file + sink

Tags:
    protocol, logging, spine-command, contracts

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from typing import Any, Literal, Protocol, runtime_checkable

LogLevel = Literal["debug", "info", "warn", "error"]


@runtime_checkable
class LogMethods(Protocol):
    """
    Leveled logging contract.

    Each method takes a message and optional metadata. Implementations may
    be plain functions or coroutines; callers that accept a ``LogMethods``
    must handle both (see ``RunLogger``).

    Examples:
        >>> class PrintSink:
        ...     def debug(self, message, metadata=None): print("debug", message)
        ...     def info(self, message, metadata=None): print("info", message)
        ...     def warn(self, message, metadata=None): print("warn", message)
        ...     def error(self, message, metadata=None): print("error", message)
        >>> isinstance(PrintSink(), LogMethods)
        True
    """

    def debug(self, message: str, metadata: Any = None) -> Any:
        ...

    def info(self, message: str, metadata: Any = None) -> Any:
        ...

    def warn(self, message: str, metadata: Any = None) -> Any:
        ...

    def error(self, message: str, metadata: Any = None) -> Any:
        ...
