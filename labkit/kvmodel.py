"""Sequential model of a key/value store, for linearizability checks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .porcupine.model import Model, Operation

OP_GET = 0
OP_PUT = 1
OP_APPEND = 2


@dataclass(frozen=True)
class KvInput:
    """A request: ``op`` is OP_GET, OP_PUT or OP_APPEND."""

    op: int
    key: str
    value: str = ""


@dataclass(frozen=True)
class KvOutput:
    """The value a request returned; only meaningful for gets."""

    value: str = ""


def partition(history: list[Operation]) -> list[list[Operation]]:
    """Split a history by key, in sorted key order."""
    by_key: dict[str, list[Operation]] = {}
    for operation in history:
        by_key.setdefault(operation.input.key, []).append(operation)
    return [by_key[key] for key in sorted(by_key)]


def init_state() -> str:
    """The value of a single key before any operation: the empty string."""
    return ""


def step(state: str, inp: KvInput, out: Any) -> tuple[bool, str]:
    """Apply one operation to the value of a single key."""
    if inp.op == OP_GET:
        return out.value == state, state
    if inp.op == OP_PUT:
        return True, inp.value
    return True, state + inp.value


def describe_operation(inp: KvInput, out: Any) -> str:
    """Render an operation for a history visualization."""
    if inp.op == OP_GET:
        return f"get('{inp.key}') -> '{out.value}'"
    if inp.op == OP_PUT:
        return f"put('{inp.key}', '{inp.value}')"
    if inp.op == OP_APPEND:
        return f"append('{inp.key}', '{inp.value}')"
    return "<invalid>"


KV_MODEL = Model(
    init=init_state,
    step=step,
    partition=partition,
    describe_operation=describe_operation,
)