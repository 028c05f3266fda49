"""Messages exchanged between the MapReduce master and its workers."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import IntEnum

_FNV32_OFFSET = 0x811C9DC5
_FNV32_PRIME = 0x01000193


class TaskType(IntEnum):
    MAP = 0
    REDUCE = 1
    EXIT = 2

    def __str__(self) -> str:
        return self.name

    def __format__(self, spec: str) -> str:
        return format(self.name, spec)


@dataclass(frozen=True)
class KeyValue:
    """One pair emitted by a map function."""

    key: str
    value: str


@dataclass
class ExampleArgs:
    x: int = 0


@dataclass
class ExampleReply:
    y: int = 0


@dataclass
class GetTaskArgs:
    pass


@dataclass
class GetTaskReply:
    task_type: TaskType = TaskType.MAP
    task_id: int = 0
    input_file_names: list[str] = field(default_factory=list)
    output_file_names: list[str] = field(default_factory=list)


@dataclass
class UpdateTaskStateArgs:
    task_type: TaskType = TaskType.MAP
    task_id: int = 0
    ok: bool = False


@dataclass
class UpdateTaskStateReply:
    pass


def master_sock() -> str:
    """A per-user UNIX-domain socket path for the master."""
    return f"/var/tmp/824-mr-{os.getuid()}"


def ihash(key: str) -> int:
    """Non-negative 31-bit FNV-1a hash; ``ihash(key) % n_reduce`` picks a bucket."""
    value = _FNV32_OFFSET
    for byte in key.encode("utf-8"):
        value = ((value ^ byte) * _FNV32_PRIME) & 0xFFFFFFFF
    return value & 0x7FFFFFFF