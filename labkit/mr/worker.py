"""The MapReduce worker: asks the master for tasks and runs them."""

from __future__ import annotations

import json
import logging
import os
import socket
import tempfile
import time
from collections import defaultdict
from itertools import groupby
from operator import attrgetter
from typing import Any, Callable, Optional

from ..labgob import LabDecoder, LabEncoder, register
from .rpc import (
    ExampleArgs,
    ExampleReply,
    GetTaskArgs,
    GetTaskReply,
    KeyValue,
    TaskType,
    UpdateTaskStateArgs,
    UpdateTaskStateReply,
    ihash,
    master_sock,
)

logger = logging.getLogger(__name__)

MapFunction = Callable[[str, str], list[KeyValue]]
ReduceFunction = Callable[[str, list[str]], str]

for _cls in (
    TaskType,
    ExampleArgs,
    ExampleReply,
    GetTaskArgs,
    GetTaskReply,
    UpdateTaskStateArgs,
    UpdateTaskStateReply,
):
    register(_cls)


def _write_map_output(output_file_name: str, kvs: list[KeyValue]) -> None:
    with open(output_file_name, "w", encoding="utf-8") as out:
        for kv in kvs:
            out.write(json.dumps({"Key": kv.key, "Value": kv.value}) + "\n")


def run_map(mapf: MapFunction, input_file_names: list[str], output_file_names: list[str]) -> None:
    """Run ``mapf`` on the single input and bucket its pairs by key hash."""
    logger.info("Map worker is working")
    input_file_name = input_file_names[0]
    with open(input_file_name, encoding="utf-8") as source:
        content = source.read()

    buckets: dict[str, list[KeyValue]] = defaultdict(list)
    for kv in mapf(input_file_name, content):
        buckets[output_file_names[ihash(kv.key) % len(output_file_names)]].append(kv)

    # every bucket gets a file, so that reduce tasks always find their inputs
    for output_file_name in output_file_names:
        _write_map_output(output_file_name, buckets.get(output_file_name, []))


def _read_reduce_input(input_file_name: str) -> list[KeyValue]:
    kvs = []
    with open(input_file_name, encoding="utf-8") as source:
        for line in source:
            if not line.strip():
                continue
            record = json.loads(line)
            try:
                kvs.append(KeyValue(record["Key"], record["Value"]))
            except (KeyError, TypeError) as exc:
                raise ValueError(f"malformed record in {input_file_name}") from exc
    return kvs


def _write_reduce_output(output_file_name: str, content: str) -> None:
    directory = os.path.dirname(output_file_name) or "."
    fd, temp_name = tempfile.mkstemp(
        dir=directory, prefix=f"{os.path.basename(output_file_name)}-"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as out:
            out.write(content)
        os.replace(temp_name, output_file_name)
    except BaseException:
        if os.path.exists(temp_name):
            os.remove(temp_name)
        raise


def run_reduce(
    reducef: ReduceFunction, input_file_names: list[str], output_file_names: list[str]
) -> None:
    """Group all input pairs by key, reduce each group and write the result."""
    logger.info("Reduce worker is working")
    all_kvs = [kv for name in input_file_names for kv in _read_reduce_input(name)]
    all_kvs.sort(key=attrgetter("key"))
    lines = []
    for key, group in groupby(all_kvs, key=attrgetter("key")):
        result = reducef(key, [kv.value for kv in group])
        lines.append(f"{key} {result}\n")
    _write_reduce_output(output_file_names[0], "".join(lines))


def call(rpcname: str, args: Any, sockname: Optional[str] = None) -> Optional[Any]:
    """Send an RPC to the master and return its reply.

    Returns None, after printing the error, when the master reports a failure.
    Raises OSError when the master cannot be reached.
    """
    with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as sock:
        sock.connect(sockname or master_sock())
        with sock.makefile("rwb") as stream:
            encoder = LabEncoder(stream)
            encoder.encode(rpcname)
            encoder.encode(args)
            stream.flush()
            try:
                ok, payload = LabDecoder(stream).decode()
            except EOFError:
                print(f"no reply to {rpcname}")
                return None
    if ok:
        return payload
    print(payload)
    return None


def worker(mapf: MapFunction, reducef: ReduceFunction, sockname: Optional[str] = None) -> None:
    """Ask the master for tasks and run them until told to exit."""
    while True:
        logger.info("Worker calling Master.GetTask")
        reply = call("Master.GetTask", GetTaskArgs(), sockname)
        if reply is None:
            logger.warning("Failed calling Master.GetTask.")
            continue

        task_type = reply.task_type
        match task_type:
            case TaskType.MAP | TaskType.REDUCE:
                logger.info(
                    "got %s task with id %d, input %s, output %s",
                    task_type,
                    reply.task_id,
                    reply.input_file_names,
                    reply.output_file_names,
                )
                try:
                    if task_type is TaskType.MAP:
                        run_map(mapf, reply.input_file_names, reply.output_file_names)
                    else:
                        run_reduce(reducef, reply.input_file_names, reply.output_file_names)
                    ok = True
                except (OSError, ValueError) as exc:
                    logger.warning("%s task %d failed: %s", task_type, reply.task_id, exc)
                    ok = False
                update = UpdateTaskStateArgs(task_type, reply.task_id, ok)
                if call("Master.UpdateTaskState", update, sockname) is None:
                    logger.warning("Failed calling Master.UpdateTask.")
                    continue
                logger.info("updated %s task with id %d.", task_type, reply.task_id)
            case TaskType.EXIT:
                logger.info("got %s task.", task_type)
                return
            case _:
                logger.warning("bad task type: %s.", task_type)
                return
        time.sleep(1)


def call_example(sockname: Optional[str] = None) -> int:
    """Call the master's example handler with 99 and return its answer."""
    reply = call("Master.Example", ExampleArgs(x=99), sockname)
    y = reply.y if reply is not None else 0
    print(f"reply.Y {y}")
    return y