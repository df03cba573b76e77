"""
spine-command - reproducible, observable commands.

Wrap any async function and every call gets its own run identity, a run
directory, a structured log file and captured outputs::

    from spine_command import command

    @command(name="double", stage="dev", base_dir="/tmp/jobs")
    async def double(input, control):
        await control.log.info("doubling", {"value": input["value"]})
        return {"doubled": input["value"] * 2}

    await double({"value": 21})
    # /tmp/jobs/__tmp__/dev/double/20261018.044100.<sha256>.log.json
    # /tmp/jobs/__tmp__/dev/double/20261018.044100.<sha256>.out.json
"""

__version__ = "0.1.0"

from spine_command.command import (
    Command,
    CommandConfig,
    CommandControl,
    OutputWriter,
    RunLocation,
    RunLogger,
    StructlogSink,
    WrittenFile,
    as_command,
    command,
    resolve_run,
)
from spine_command.core.errors import (
    CommandConfigError,
    CommandError,
    InputSerializationError,
    InvalidArtifactNameError,
)
from spine_command.core.logging import configure_logging, get_logger
from spine_command.core.protocols import LogMethods
from spine_command.core.settings import CommandSettings, get_settings
from spine_command.execution.serializer import LogWriteSerializer, get_log_serializer

__all__ = [
    "__version__",
    # Commands
    "Command",
    "CommandConfig",
    "CommandControl",
    "as_command",
    "command",
    # Run internals
    "RunLocation",
    "RunLogger",
    "OutputWriter",
    "WrittenFile",
    "StructlogSink",
    "resolve_run",
    # Errors
    "CommandError",
    "CommandConfigError",
    "InputSerializationError",
    "InvalidArtifactNameError",
    # Ambient
    "LogMethods",
    "LogWriteSerializer",
    "get_log_serializer",
    "CommandSettings",
    "get_settings",
    "configure_logging",
    "get_logger",
]
