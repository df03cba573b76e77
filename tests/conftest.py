"""
Shared pytest fixtures and configuration for spine-command tests.

This module provides:
- Serializer/settings reset fixtures for test isolation
- A recording log sink
- Deterministic clocks for run identities
- A tolerant reader for run log files

Usage:
    Fixtures are auto-discovered by pytest. Use them as function arguments:

    def test_something(recording_sink, tmp_path, read_log):
        ...
"""

import json
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Callable, Generator

import pytest

from spine_command.command.config import CommandConfig
from spine_command.core.settings import get_settings
from spine_command.execution.serializer import LogWriteSerializer, reset_log_serializer


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark all tests without explicit markers as unit tests."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration", "slow"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def fresh_log_serializer() -> Generator[LogWriteSerializer, None, None]:
    """
    Give each test its own process-wide serializer.

    Waiter futures belong to the event loop that created them, and every
    async test runs on a new loop.
    """
    serializer = reset_log_serializer()
    yield serializer
    reset_log_serializer()


@pytest.fixture(autouse=True)
def clean_settings_cache() -> Generator[None, None, None]:
    """Drop cached CommandSettings so env changes in a test take effect."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# =============================================================================
# Sinks
# =============================================================================


class RecordingSink:
    """LogMethods implementation that remembers every call."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, Any]] = []

    def debug(self, message: str, metadata: Any = None) -> None:
        self.calls.append(("debug", message, metadata))

    def info(self, message: str, metadata: Any = None) -> None:
        self.calls.append(("info", message, metadata))

    def warn(self, message: str, metadata: Any = None) -> None:
        self.calls.append(("warn", message, metadata))

    def error(self, message: str, metadata: Any = None) -> None:
        self.calls.append(("error", message, metadata))

    @property
    def messages(self) -> list[str]:
        return [message for _, message, _ in self.calls]


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def command_config(tmp_path: Path, recording_sink: RecordingSink) -> CommandConfig:
    """A test command rooted in a temporary directory."""
    return CommandConfig(
        name="double",
        purpose="double a number",
        stage="test",
        log=recording_sink,
        base_dir=tmp_path,
    )


# =============================================================================
# Deterministic Clocks
# =============================================================================


FIXED_NOW = datetime(2026, 1, 15, 10, 30, 45)


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """Naive local clock frozen at 2026-01-15 10:30:45."""
    return lambda: FIXED_NOW


@pytest.fixture
def ticking_clock() -> Callable[[], datetime]:
    """Naive local clock that advances one second per call."""
    state = {"now": FIXED_NOW}

    def tick() -> datetime:
        now = state["now"]
        state["now"] = now + timedelta(seconds=1)
        return now

    return tick


# =============================================================================
# Run File Helpers
# =============================================================================


def parse_log_file(path: Path) -> list[dict[str, Any]]:
    """Parse a run log, tolerating the trailing comma before ``]``."""
    text = path.read_text(encoding="utf-8").rstrip()
    assert text.startswith("["), text[:40]
    body = text[1:]
    if body.endswith("]"):
        body = body[:-1]
    body = body.rstrip().rstrip(",")
    return json.loads(f"[{body}]")


@pytest.fixture
def read_log() -> Callable[[Path], list[dict[str, Any]]]:
    return parse_log_file
