"""A MapReduce application that reports whether reduce tasks ran in parallel."""

from __future__ import annotations

import os
import re
import time
from pathlib import Path

from ..mr.rpc import KeyValue

__all__ = ["nparallel", "map_function", "reduce_function"]


def _alive(pid: int) -> bool:
    try:
        os.kill(pid, 0)
    except (OSError, OverflowError):
        return False
    return True


def nparallel(phase: str) -> int:
    """Count the workers of ``phase`` running now, this one included."""
    marker = Path(f"mr-worker-{phase}-{os.getpid()}")
    marker.write_text("x")

    pattern = re.compile(rf"mr-worker-{re.escape(phase)}-([+-]?\d+)")
    running = 0
    for name in os.listdir("."):
        match = pattern.match(name)
        if match and _alive(int(match.group(1))):
            running += 1

    time.sleep(1)
    marker.unlink()
    return running


def map_function(filename: str, contents: str) -> list[KeyValue]:
    """Emit ten keys, so that there is work for ten reduce tasks."""
    return [KeyValue(key, "1") for key in "abcdefghij"]


def reduce_function(key: str, values: list[str]) -> str:
    """Return how many reduce workers were running at the same time."""
    return str(nparallel("reduce"))