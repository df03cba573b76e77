"""
Deterministic input hashing for run identities.

Every command run is named ``<timestamp>.<inputHash>``. The hash half lets
an operator spot at a glance which runs saw the same input, so it must be
stable across processes, platforms and dict insertion order.

Manifesto:
    - **Canonical:** keys sorted, compact separators, UTF-8 kept as-is
    - **Deterministic:** same input always produces the same digest
    - **Collision-resistant:** SHA-256 over the canonical text
    - **Loud:** inputs that cannot be serialized fail before any I/O

Examples:
    >>> compute_input_hash({"b": 1, "a": 2}) == compute_input_hash({"a": 2, "b": 1})
    True
    >>> len(compute_input_hash({"value": 21}))
    64

Tags:
    hashing, canonical-json, run-identity, spine-command

Doc-Types:
    - API Reference
"""

import hashlib
from typing import Any

from .errors import InputSerializationError
from .serialization import dumps_compact


def canonical_dumps(value: Any) -> str:
    """
    Canonical JSON serialization of a command input.

    Rules:
    - Sorted keys
    - Stable separators (",", ":")
    - UTF-8 kept as-is (no ASCII escaping)
    - NaN and Infinity rejected
    - Lists keep their order; sets are sorted

    Args:
        value: Command input

    Returns:
        Canonical JSON text

    Raises:
        InputSerializationError: Cyclic structures, NaN/Infinity or
            types with no JSON form
    """
    try:
        return dumps_compact(value)
    except (TypeError, ValueError, RecursionError) as exc:
        raise InputSerializationError(
            f"Command input cannot be serialized: {exc}", cause=exc
        ) from exc


def compute_input_hash(value: Any) -> str:
    """
    SHA-256 hex digest of the canonical serialization of ``value``.

    Args:
        value: Command input

    Returns:
        64-char hex string
    """
    return hashlib.sha256(canonical_dumps(value).encode("utf-8")).hexdigest()
