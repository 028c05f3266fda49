"""Inverted index: for each word, the documents that contain it."""

from __future__ import annotations

from itertools import groupby
from typing import Iterator

from ..mr.rpc import KeyValue


def _words(text: str) -> Iterator[str]:
    for is_letter, chars in groupby(text, key=str.isalpha):
        if is_letter:
            yield "".join(chars)


def map_function(document: str, value: str) -> list[KeyValue]:
    """Emit ``(word, document)`` once for each distinct word."""
    return [KeyValue(word, document) for word in dict.fromkeys(_words(value))]


def reduce_function(key: str, values: list[str]) -> str:
    """Return the document count and the sorted, comma-separated documents."""
    documents = sorted(values)
    return f"{len(documents)} {','.join(documents)}"