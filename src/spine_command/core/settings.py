"""Environment-driven settings for spine-command.

Commands usually share a base directory and a stage label across a whole
process (``dev`` on a laptop, ``prod`` in a job runner). ``CommandSettings``
reads them from the environment so each command definition only names
itself.

Features:
    - **CommandSettings:** base_dir, stage, log_level, json_logs
    - **env_prefix:** ``SPINE_COMMAND_`` (e.g. ``SPINE_COMMAND_STAGE=prod``)
    - **.env file support:** Automatic loading via pydantic-settings
    - **Extra ignore:** Unknown env vars don't cause startup failures

Examples:
    >>> import os
    >>> os.environ["SPINE_COMMAND_STAGE"] = "prod"
    >>> CommandSettings().stage
    'prod'

Tags:
    settings, configuration, pydantic, environment, spine-command
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CommandSettings(BaseSettings):
    """Process-wide defaults for command definitions.

    Fields
    ──────
    base_dir     : Root under which ``__tmp__/<stage>/<name>`` is created
    stage        : Stage label used as a path segment
    log_level    : Structlog log level
    json_logs    : Force JSON (True) / console (False) rendering; None = auto
    """

    model_config = SettingsConfigDict(
        env_prefix="SPINE_COMMAND_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Storage ──────────────────────────────────────────────────
    base_dir: Path = Field(
        default_factory=Path.cwd,
        description="Root directory for run directories",
    )
    stage: str = "local"

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    json_logs: bool | None = None


@lru_cache(maxsize=1)
def get_settings() -> CommandSettings:
    """Return the cached process settings."""
    return CommandSettings()
