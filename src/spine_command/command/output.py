"""Output Writer — the ``out`` side channel of a command run.

``out.write(name=..., data=...)`` lets command logic drop any number of
named files next to the run's log::

    <directory>/<prefix>.out.<name>

Nested names create their parent directories. Writing the same name twice
replaces the first file. Output writes do not go through the log
serializer; every run has its own prefix, so runs never share a file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from spine_command.core.serialization import dumps_pretty

from .files import ensure_directory, write_data
from .resolver import RunLocation

UNDEFINED_OUTPUT = "undefined"


@dataclass(frozen=True)
class WrittenFile:
    """Where an output artifact landed."""

    path: Path


def render_output(output: Any) -> str:
    """Text of the primary output file.

    Strings are written verbatim, ``None`` as ``undefined``, anything else
    as indented JSON. Serialization errors propagate.
    """
    if isinstance(output, str):
        return output
    if output is None:
        return UNDEFINED_OUTPUT
    return dumps_pretty(output) or UNDEFINED_OUTPUT


@dataclass
class OutputWriter:
    """Writes output artifacts for one run."""

    location: RunLocation
    written: list[Path] = field(default_factory=list)

    async def write(self, *, name: str, data: str | bytes | bytearray | memoryview) -> WrittenFile:
        """Write ``data`` to ``<prefix>.out.<name>`` in the run directory.

        Raises:
            InvalidArtifactNameError: ``name`` is empty, absolute or escapes the directory
            OSError: The file could not be written
        """
        path = self.location.artifact_path(name)
        await ensure_directory(path.parent)
        await write_data(path, data)
        self.written.append(path)
        return WrittenFile(path=path)

    async def write_primary(self, output: Any) -> WrittenFile:
        """Persist the command's return value to ``<prefix>.out.json``."""
        path = self.location.output_path
        await write_data(path, render_output(output))
        return WrittenFile(path=path)
