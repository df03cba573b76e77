"""Command definition, run resolution and execution."""

from .config import CommandConfig, StructlogSink
from .output import OutputWriter, WrittenFile
from .resolver import RunLocation, resolve_run
from .run_logger import RunLogger
from .wrapper import Command, CommandControl, as_command, command

__all__ = [
    "Command",
    "CommandConfig",
    "CommandControl",
    "OutputWriter",
    "RunLocation",
    "RunLogger",
    "StructlogSink",
    "WrittenFile",
    "as_command",
    "command",
    "resolve_run",
]
