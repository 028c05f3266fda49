# labkit

Building blocks for experimenting with distributed systems:

- **`labkit.porcupine`** – a linearizability checker for histories of
  operations or call/return events.
- **`labkit.kvmodel`** – a ready-made sequential model of a key/value store
  (get, put, append) for that checker.
- **`labkit.labgob`** – an encoder/decoder for RPC and persisted values that
  warns about fields that will not travel and about decoding into objects
  that already hold non-default values.
- **`labkit.mr`** – a small MapReduce framework: a master that hands out map
  and reduce tasks over a UNIX-domain socket, and workers that run them.
- **`labkit.mrapps`** – MapReduce applications: word count (`wc`), an
  inverted index (`indexer`), and test applications (`crash`, `nocrash`,
  `mtiming`, `rtiming`).

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Checking linearizability

```python
from labkit.kvmodel import KV_MODEL, KvInput, KvOutput, OP_GET, OP_PUT
from labkit.porcupine.checker import check_operations
from labkit.porcupine.model import Operation

history = [
    Operation(client_id=0, input=KvInput(OP_PUT, "x", "1"), call=0,
              output=KvOutput(), return_=10),
    Operation(client_id=1, input=KvInput(OP_GET, "x"), call=20,
              output=KvOutput("1"), return_=30),
]
print(check_operations(KV_MODEL, history))   # True
```

A `Model` needs `init` and `step`; `partition`, `partition_event`, `equal`,
`describe_operation` and `describe_state` are optional and
`Model.with_defaults()` fills them in. `check_operations` returns `True` when
the history is linearizable. `check_operations_timeout` and
`check_operations_verbose` take a timeout in seconds (`0` or `None` for none)
and return a `CheckResult` (`OK`, `ILLEGAL`, or `UNKNOWN` when the check timed
out); the verbose form also returns a `LinearizationInfo` holding the longest
partial linearizations of each partition. Histories of `Event` values
(`EventKind.CALL` / `EventKind.RETURN`, matched by `id`) are checked the same
way with `check_events`, `check_events_timeout` and `check_events_verbose`.

## Encoding values

```python
import io
from dataclasses import dataclass
from labkit.labgob import LabDecoder, LabEncoder, register

@dataclass
class Args:
    key: str = ""
    value: str = ""

register(Args)
buf = io.BytesIO()
LabEncoder(buf).encode(Args("k", "v"))
buf.seek(0)
print(LabDecoder(buf).decode())   # Args(key='k', value='v')
```

Values are written one per line as tagged JSON; dataclasses, enums, lists,
tuples, sets, dicts, bytes and plain scalars are supported. Dataclass fields
whose names start with an underscore are not transmitted and produce a
warning. `LabDecoder.decode_into(target)` fills an existing dataclass, list,
dict or set, warning if it already holds non-default values.
`labgob.error_count()` reports how many warnings were issued.

## MapReduce

Run a whole job in one process, writing `mr-out-0`:

```
labkit-mrsequential wc pg-*.txt
```

Run it distributed: start a master with the input files, then one or more
workers with the application to use:

```
labkit-mrmaster pg-*.txt
labkit-mrworker wc
```

The application may be named plainly (`wc`) or by a path such as
`../mrapps/wc.so`; only the final name without its suffix is used. The
master runs ten reduce tasks and listens on `/var/tmp/824-mr-<uid>`. Map
tasks write intermediate files `mr-X-Y` as JSON lines; reduce tasks write
`mr-out-Y` with one `key value` line per key. A task that a worker does not
finish within ten seconds is handed to another worker. The master exits once
every task is done, and workers exit when the master tells them there is no
more work.

From Python, `labkit.mr.master.make_master(files, n_reduce, sockname)` starts
a master (`Master.done()`, `Master.shutdown()`), and
`labkit.mr.worker.worker(mapf, reducef, sockname)` runs a worker loop;
`run_map`, `run_reduce` and `labkit.mrsequential.run_sequential` can be used
directly on files.

## What this package does not do

- It has no simulated in-process RPC network; the MapReduce master and
  workers talk over a real UNIX-domain socket only.
- It has no replicated key/value service; `labkit.kvmodel` only describes
  how one should behave, for checking recorded histories.
- It does not draw visualizations of checked histories.