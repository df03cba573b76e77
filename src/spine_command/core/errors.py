"""
Structured error types for spine-command.

A wrapped command can fail in three distinct ways, and callers need to be
able to tell them apart:

- **Precondition failure:** the input cannot be serialized, so no run
  identity exists and nothing has touched the filesystem yet.
- **I/O failure:** directory creation, a log append or an output write
  failed. These surface as the original ``OSError`` and are not wrapped.
- **Logic failure:** anything raised by the wrapped logic. It is logged
  under ``output.error`` and re-raised unchanged.

Only the first kind is raised by this package; the other two belong to the
operating system and to the caller's own code.

Architecture:
    ::

        ┌──────────────────────────────────────────────────────┐
        │                    CommandError                       │
        │        (category, context, cause, to_dict())          │
        ├──────────────────────────────────────────────────────┤
        │  InputSerializationError   InvalidArtifactNameError   │
        │  (VALIDATION)              (VALIDATION)               │
        │                                                       │
        │  CommandConfigError                                   │
        │  (CONFIG)                                             │
        └──────────────────────────────────────────────────────┘

Examples:
    >>> error = InputSerializationError("input is cyclic")
    >>> error.category
    <ErrorCategory.VALIDATION: 'VALIDATION'>
    >>> error.with_context(command="double").to_dict()["context"]
    {'command': 'double'}

Tags:
    error-handling, exception-hierarchy, spine-command

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import errno
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing."""

    VALIDATION = "VALIDATION"     # Unserializable input, bad artifact names
    CONFIG = "CONFIG"             # Missing or invalid settings
    INTERNAL = "INTERNAL"         # Bugs, unexpected state


@dataclass
class ErrorContext:
    """
    Structured metadata attached to a CommandError.

    Attributes:
        command: Name of the command being invoked
        stage: Stage label of the command
        run: Run file prefix, when one was resolved
        metadata: Additional key-value pairs
    """

    command: str | None = None
    stage: str | None = None
    run: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["command", "stage", "run"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class CommandError(Exception):
    """
    Base exception for all errors raised by spine-command itself.

    Subclasses set ``default_category`` so each error routes to the right
    place in logs without the raiser having to think about it.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> CommandError:
        """
        Add context to this error (fluent API).

        Usage:
            raise InputSerializationError("cyclic").with_context(command="double")
        """
        for key, value in kwargs.items():
            if key != "metadata" and hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class InputSerializationError(CommandError):
    """
    Input could not be serialized to compute its run identity.

    Raised before any directory or log side effects happen.
    """

    default_category = ErrorCategory.VALIDATION


class InvalidArtifactNameError(CommandError):
    """An ``out.write`` name is empty, absolute, or escapes the run directory."""

    default_category = ErrorCategory.VALIDATION

    def __init__(self, name: str, message: str | None = None):
        self.name = name
        super().__init__(message or f"Invalid output artifact name: {name!r}")


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class CommandConfigError(CommandError):
    """Command configuration could not be built."""

    default_category = ErrorCategory.CONFIG


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def is_error_like(value: object) -> bool:
    """Check whether a raised value can be logged as an error.

    Only ``Exception`` instances whose message can be rendered qualify.
    ``BaseException``-only values (cancellation, interrupts, exits) do not.
    """
    if not isinstance(value, Exception):
        return False
    try:
        str(value)
    except Exception:
        return False
    return True


def error_metadata(error: Exception) -> dict[str, Any]:
    """Describe an error for the ``output.error`` log entry.

    CommandErrors use their own ``to_dict()``. Any other exception
    contributes its public instance attributes plus ``error_type`` and
    ``message``; the message always wins over an attribute of the same name.
    ``OSError`` also carries ``errno``, ``code`` (e.g. ``ENOENT``),
    ``strerror`` and the filename(s) involved.
    """
    if isinstance(error, CommandError):
        return error.to_dict()
    fields = {
        key: value
        for key, value in getattr(error, "__dict__", {}).items()
        if not key.startswith("_")
    }
    if isinstance(error, OSError):
        os_fields = {
            "errno": error.errno,
            "code": errno.errorcode.get(error.errno) if error.errno is not None else None,
            "strerror": error.strerror,
            "filename": error.filename,
            "filename2": error.filename2,
        }
        fields.update({key: value for key, value in os_fields.items() if value is not None})
    return {**fields, "error_type": type(error).__name__, "message": str(error)}


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "CommandError",
    "InputSerializationError",
    "InvalidArtifactNameError",
    "CommandConfigError",
    "is_error_like",
    "error_metadata",
]
