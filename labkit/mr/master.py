"""The MapReduce master: hands out map and reduce tasks and tracks them."""

from __future__ import annotations

import contextlib
import logging
import os
import socketserver
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from ..labgob import LabDecoder, LabEncoder, register
from .rpc import (
    ExampleArgs,
    ExampleReply,
    GetTaskArgs,
    GetTaskReply,
    TaskType,
    UpdateTaskStateArgs,
    UpdateTaskStateReply,
    master_sock,
)

logger = logging.getLogger(__name__)

_TASK_TIMEOUT = 10.0
_EXIT_TASK_ID = -10000

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


class TaskState(Enum):
    CREATED = 0
    ASSIGNED = 1
    UPDATED = 2

    def __str__(self) -> str:
        return self.name


@dataclass
class _Task:
    task_id: int
    state: TaskState
    input_file_names: list[str]
    output_file_names: list[str]


class _RequestHandler(socketserver.StreamRequestHandler):
    def handle(self) -> None:
        decoder = LabDecoder(self.rfile)
        try:
            rpcname = decoder.decode()
            args = decoder.decode()
        except (EOFError, ValueError, TypeError):
            return
        try:
            reply: tuple[bool, Any] = (True, self.server.master._handle(rpcname, args))
        except Exception as exc:  # reported back to the caller
            reply = (False, f"{type(exc).__name__}: {exc}")
        LabEncoder(self.wfile).encode(reply)


class _RpcServer(socketserver.ThreadingMixIn, socketserver.UnixStreamServer):
    daemon_threads = True
    block_on_close = False
    master: Master


class Master:
    """Keeps the map and reduce tasks of one job and their states."""

    def __init__(self, files: list[str], n_reduce: int, sockname: Optional[str] = None) -> None:
        self.input_files = list(files)
        self.n_map = len(self.input_files)
        self.n_reduce = n_reduce
        self.sockname = sockname or master_sock()
        self.intermediate_files: list[str] = []
        self.output_files: list[str] = []
        self._cond = threading.Condition()
        self._timers: list[threading.Timer] = []
        self._server: Optional[_RpcServer] = None
        self._tasks: dict[TaskType, dict[int, _Task]] = {
            TaskType.MAP: {
                i: _Task(
                    i,
                    TaskState.CREATED,
                    [self.input_files[i]],
                    [f"mr-{i}-{r}" for r in range(n_reduce)],
                )
                for i in range(self.n_map)
            },
            TaskType.REDUCE: {
                r: _Task(
                    r,
                    TaskState.CREATED,
                    [f"mr-{m}-{r}" for m in range(self.n_map)],
                    [f"mr-out-{r}"],
                )
                for r in range(n_reduce)
            },
        }

    def _phase_done(self, task_type: TaskType) -> bool:
        return all(t.state is TaskState.UPDATED for t in self._tasks[task_type].values())

    def _expire(self, task_type: TaskType, task_id: int) -> None:
        with self._cond:
            task = self._tasks[task_type][task_id]
            if task.state is not TaskState.UPDATED:
                task.state = TaskState.CREATED
                logger.info(
                    "%s task %d timed out, will be reassigned to others", task_type, task_id
                )
                self._cond.notify_all()

    def get_task(self, args: GetTaskArgs) -> GetTaskReply:
        """Hand out a map task, then a reduce task, then EXIT when all are done.

        Blocks while every unfinished task of the current phase is assigned.
        """
        with self._cond:
            while True:
                for task_type in (TaskType.MAP, TaskType.REDUCE):
                    if not self._phase_done(task_type):
                        break
                else:
                    return GetTaskReply(TaskType.EXIT, _EXIT_TASK_ID, [], [])
                task = next(
                    (t for t in self._tasks[task_type].values() if t.state is TaskState.CREATED),
                    None,
                )
                if task is not None:
                    break
                self._cond.wait()

            logger.info("Assigning %s task %d, state is %s.", task_type, task.task_id, task.state)
            task.state = TaskState.ASSIGNED
            timer = threading.Timer(_TASK_TIMEOUT, self._expire, args=(task_type, task.task_id))
            timer.daemon = True
            self._timers = [t for t in self._timers if t.is_alive()]
            self._timers.append(timer)
            timer.start()
            return GetTaskReply(
                task_type,
                task.task_id,
                list(task.input_file_names),
                list(task.output_file_names),
            )

    def update_task_state(self, args: UpdateTaskStateArgs) -> UpdateTaskStateReply:
        """Record a worker's result; a failed task goes back to be reassigned."""
        try:
            task_type = TaskType(args.task_type)
        except ValueError:
            task_type = None
        if task_type not in (TaskType.MAP, TaskType.REDUCE):
            logger.warning("bad task type: %s.", args.task_type)
            raise ValueError("bad task type")
        with self._cond:
            task = self._tasks[task_type][args.task_id]
            if not args.ok:
                task.state = TaskState.CREATED
                logger.info(
                    "Got worker err on %s task %d, will be reassigned.", task_type, args.task_id
                )
            elif task.state is TaskState.ASSIGNED:
                # a task that timed out is CREATED again and is not updated
                task.state = TaskState.UPDATED
                if task_type is TaskType.MAP:
                    self.intermediate_files.extend(task.output_file_names)
                else:
                    self.output_files.extend(task.output_file_names)
            self._cond.notify_all()
            logger.info("updated taskID %d, state: %s", args.task_id, task.state)
        return UpdateTaskStateReply()

    def example(self, args: ExampleArgs) -> ExampleReply:
        """An example handler: reply with ``x + 1``."""
        print("got call from client")
        return ExampleReply(y=args.x + 1)

    def _handle(self, rpcname: str, args: Any) -> Any:
        handlers: dict[str, Callable[[Any], Any]] = {
            "Master.GetTask": self.get_task,
            "Master.UpdateTaskState": self.update_task_state,
            "Master.Example": self.example,
        }
        handler = handlers.get(rpcname)
        if handler is None:
            raise LookupError(f"unknown method {rpcname}; expecting one of {sorted(handlers)}")
        return handler(args)

    def serve(self) -> None:
        """Start answering worker RPCs on the UNIX-domain socket."""
        with contextlib.suppress(FileNotFoundError):
            os.remove(self.sockname)
        server = _RpcServer(self.sockname, _RequestHandler)
        server.master = self
        self._server = server
        threading.Thread(target=server.serve_forever, daemon=True).start()

    def shutdown(self) -> None:
        """Stop serving, remove the socket and cancel pending task timeouts."""
        with self._cond:
            timers, self._timers = self._timers, []
        for timer in timers:
            timer.cancel()
        server, self._server = self._server, None
        if server is not None:
            server.shutdown()
            server.server_close()
            with contextlib.suppress(FileNotFoundError):
                os.remove(self.sockname)

    def done(self) -> bool:
        """Tell whether every map and reduce task has finished."""
        with self._cond:
            return self._phase_done(TaskType.MAP) and self._phase_done(TaskType.REDUCE)


def make_master(files: list[str], n_reduce: int, sockname: Optional[str] = None) -> Master:
    """Create a master for ``files`` with ``n_reduce`` reduce tasks and serve it."""
    master = Master(files, n_reduce, sockname)
    master.serve()
    return master