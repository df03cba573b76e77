"""Run Identity & Directory Resolver.

Turns (config, input, start time) into where a run's files live::

    <base_dir>/__tmp__/<stage>/<name>/<YYYYMMDD.HHMMSS>.<sha256(input)>.log.json
                                                                     .out.json
                                                                     .out.<name>

The prefix is a filename stem inside the command directory, not a
subdirectory. Two runs with the same input in the same local second share
a prefix.

No I/O happens here; ``resolve_run`` is pure apart from the ``now`` it is
given.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Any

from spine_command.core.errors import InvalidArtifactNameError
from spine_command.core.hashing import compute_input_hash
from spine_command.core.timestamps import format_run_timestamp

from .config import CommandConfig

TMP_DIR_NAME = "__tmp__"


@dataclass(frozen=True)
class RunLocation:
    """Resolved identity and file paths of one run."""

    directory: Path
    timestamp: str
    input_hash: str

    @property
    def file_prefix(self) -> str:
        return f"{self.timestamp}.{self.input_hash}"

    @property
    def log_path(self) -> Path:
        return self.directory / f"{self.file_prefix}.log.json"

    @property
    def output_path(self) -> Path:
        return self.directory / f"{self.file_prefix}.out.json"

    def artifact_path(self, name: str) -> Path:
        """Path of an auxiliary output written via ``out.write(name=...)``.

        ``name`` may contain nested segments (``reports/daily.csv``); the
        prefix is applied to the first segment.

        Raises:
            InvalidArtifactNameError: Empty, absolute, or escaping the run directory
        """
        if not name or PurePosixPath(name).is_absolute() or PureWindowsPath(name).is_absolute():
            raise InvalidArtifactNameError(name)
        parts = PurePosixPath(name.replace("\\", "/")).parts
        if ".." in parts:
            raise InvalidArtifactNameError(name, f"Output artifact name escapes the run directory: {name!r}")
        return self.directory / f"{self.file_prefix}.out.{name}"


def command_directory(config: CommandConfig) -> Path:
    """``<base_dir>/__tmp__/<stage>/<name>``"""
    return config.base_dir / TMP_DIR_NAME / config.stage / config.name


def resolve_run(config: CommandConfig, input: Any, now: datetime) -> RunLocation:
    """Resolve the run identity for one invocation.

    Args:
        config: Command configuration
        input: Raw command input
        now: Invocation start time

    Raises:
        InputSerializationError: ``input`` has no canonical JSON form
    """
    return RunLocation(
        directory=command_directory(config),
        timestamp=format_run_timestamp(now),
        input_hash=compute_input_hash(input),
    )
