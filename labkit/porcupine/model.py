"""Histories, events and the model that a linearizability check runs against."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional


@dataclass(frozen=True)
class Operation:
    """A completed operation: its input and output with call and return times."""

    client_id: int = 0
    input: Any = None
    call: int = 0
    output: Any = None
    return_: int = 0


class EventKind(Enum):
    CALL = False
    RETURN = True


@dataclass(frozen=True)
class Event:
    """One half of an operation; calls and returns are matched by ``id``."""

    client_id: int = 0
    kind: EventKind = EventKind.CALL
    value: Any = None
    id: int = 0


class CheckResult(str, Enum):
    UNKNOWN = "Unknown"
    OK = "Ok"
    ILLEGAL = "Illegal"


def no_partition(history: list[Operation]) -> list[list[Operation]]:
    """Treat the whole history as a single partition."""
    return [history]


def no_partition_event(history: list[Event]) -> list[list[Event]]:
    """Treat the whole event history as a single partition."""
    return [history]


def shallow_equal(state1: Any, state2: Any) -> bool:
    return state1 == state2


def default_describe_operation(inp: Any, out: Any) -> str:
    return f"{inp} -> {out}"


def default_describe_state(state: Any) -> str:
    return f"{state}"


@dataclass(frozen=True)
class Model:
    """A sequential specification.

    ``step(state, input, output)`` returns whether the step is allowed and
    the new state; it must not mutate ``state``.
    """

    init: Callable[[], Any]
    step: Callable[[Any, Any, Any], tuple[bool, Any]]
    partition: Optional[Callable[[list[Operation]], list[list[Operation]]]] = None
    partition_event: Optional[Callable[[list[Event]], list[list[Event]]]] = None
    equal: Optional[Callable[[Any, Any], bool]] = None
    describe_operation: Optional[Callable[[Any, Any], str]] = None
    describe_state: Optional[Callable[[Any], str]] = None

    def with_defaults(self) -> Model:
        """Return a copy with every missing optional function filled in."""
        return dataclasses.replace(
            self,
            partition=self.partition or no_partition,
            partition_event=self.partition_event or no_partition_event,
            equal=self.equal or shallow_equal,
            describe_operation=self.describe_operation or default_describe_operation,
            describe_state=self.describe_state or default_describe_state,
        )