"""A MapReduce application that sometimes crashes and sometimes stalls."""

from __future__ import annotations

import logging
import os
import secrets
import time

from ..mr.rpc import KeyValue

logger = logging.getLogger(__name__)


def maybe_crash() -> None:
    """Exit the process a third of the time; sleep up to 10 s another third."""
    roll = secrets.randbelow(1000)
    if roll < 330:
        logger.info("Crash!")
        os._exit(1)
    elif roll < 660:
        time.sleep(secrets.randbelow(10_000) / 1000)


def map_function(filename: str, contents: str) -> list[KeyValue]:
    """Emit a fixed set of pairs describing the input."""
    maybe_crash()
    logger.info("Not crash!")
    return [
        KeyValue("a", filename),
        KeyValue("b", str(len(filename.encode("utf-8")))),
        KeyValue("c", str(len(contents.encode("utf-8")))),
        KeyValue("d", "xyzzy"),
    ]


def reduce_function(key: str, values: list[str]) -> str:
    """Join the sorted values with spaces, for deterministic output."""
    maybe_crash()
    logger.info("Not crash!")
    return " ".join(sorted(values))