"""
JSON rendering shared by the input hash, the run log and the output file.

Commands take and return ordinary Python values: dicts and lists, but also
pydantic models, dataclasses, paths and datetimes. ``json`` only knows the
first group, so every place that writes JSON goes through ``json_default``.

Two modes:
    - **strict** (hashing, primary output): unknown types raise ``TypeError``
    - **lenient** (log metadata): unknown types fall back to ``repr()``
"""

from __future__ import annotations

import dataclasses
import json
from datetime import date, datetime, time
from enum import Enum
from functools import partial
from pathlib import PurePath
from typing import Any

from pydantic import BaseModel


def json_default(obj: Any, *, strict: bool = True) -> Any:
    """``default=`` hook for ``json.dumps``.

    Args:
        obj: Object ``json`` could not encode natively
        strict: Raise ``TypeError`` for unsupported types instead of using ``repr()``

    Returns:
        A JSON-encodable stand-in for ``obj``
    """
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    if isinstance(obj, (datetime, date, time)):
        return obj.isoformat()
    if isinstance(obj, PurePath):
        return str(obj)
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (set, frozenset)):
        return sorted(obj, key=repr)
    if strict:
        raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")
    return repr(obj)


def dumps_pretty(value: Any, *, strict: bool = True) -> str:
    """Render ``value`` as 2-space indented JSON."""
    return json.dumps(
        value,
        indent=2,
        ensure_ascii=False,
        default=partial(json_default, strict=strict),
    )


def dumps_compact(value: Any) -> str:
    """Render ``value`` as canonical, key-sorted, whitespace-free JSON.

    Raises:
        TypeError: Unsupported type somewhere in ``value``
        ValueError: Circular reference, NaN or Infinity
    """
    return json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
        default=json_default,
    )
