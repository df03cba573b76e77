"""Non-blocking file primitives used by a command run.

Each helper runs the blocking call in a worker thread with
``asyncio.to_thread`` so the event loop keeps serving other runs while the
disk works. Errors are the plain ``OSError`` the OS raised.
"""

from __future__ import annotations

import asyncio
from pathlib import Path


def _append_text(path: Path, text: str) -> None:
    with open(path, "a", encoding="utf-8") as handle:
        handle.write(text)


def _write_data(path: Path, data: str | bytes | bytearray | memoryview) -> None:
    if isinstance(data, str):
        path.write_text(data, encoding="utf-8")
    else:
        path.write_bytes(bytes(data))


async def ensure_directory(path: Path) -> None:
    """Create ``path`` and its parents; existing directories are fine."""
    await asyncio.to_thread(path.mkdir, parents=True, exist_ok=True)


async def append_text(path: Path, text: str) -> None:
    """Append UTF-8 text to ``path``, creating the file if needed."""
    await asyncio.to_thread(_append_text, path, text)


async def write_data(path: Path, data: str | bytes | bytearray | memoryview) -> None:
    """Replace ``path`` with ``data`` (text as UTF-8, bytes as-is)."""
    await asyncio.to_thread(_write_data, path, data)
