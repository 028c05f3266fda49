"""Word count: map emits each word with "1", reduce counts them."""

from __future__ import annotations

from itertools import groupby
from typing import Iterator

from ..mr.rpc import KeyValue


def _words(text: str) -> Iterator[str]:
    for is_letter, chars in groupby(text, key=str.isalpha):
        if is_letter:
            yield "".join(chars)


def map_function(filename: str, contents: str) -> list[KeyValue]:
    """Emit ``(word, "1")`` for every run of letters in ``contents``."""
    return [KeyValue(word, "1") for word in _words(contents)]


def reduce_function(key: str, values: list[str]) -> str:
    """Return the number of occurrences of ``key``."""
    return str(len(values))