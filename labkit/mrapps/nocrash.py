"""The same application as ``crash``, but it never crashes."""

from __future__ import annotations

import os
import secrets

from ..mr.rpc import KeyValue

_CRASH_PERMILLE = 0


def maybe_crash() -> None:
    """Draw a crash decision that never comes out as a crash."""
    if secrets.randbelow(1000) < _CRASH_PERMILLE:
        os._exit(1)


def map_function(filename: str, contents: str) -> list[KeyValue]:
    """Emit a fixed set of pairs describing the input."""
    maybe_crash()
    return [
        KeyValue("a", filename),
        KeyValue("b", str(len(filename.encode("utf-8")))),
        KeyValue("c", str(len(contents.encode("utf-8")))),
        KeyValue("d", "xyzzy"),
    ]


def reduce_function(key: str, values: list[str]) -> str:
    """Join the sorted values with spaces, for deterministic output."""
    maybe_crash()
    return " ".join(sorted(values))