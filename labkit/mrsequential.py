"""A simple sequential MapReduce over a set of input files."""

from __future__ import annotations

import os
import sys
from itertools import groupby
from operator import attrgetter
from pathlib import Path
from typing import Iterable, Optional, Union

from .mr.plugins import load_app
from .mr.worker import MapFunction, ReduceFunction

_OUTPUT_NAME = "mr-out-0"


def run_sequential(
    mapf: MapFunction,
    reducef: ReduceFunction,
    filenames: Iterable[Union[str, os.PathLike]],
    out_path: Union[str, os.PathLike],
) -> Path:
    """Map every file, reduce each distinct key and write ``key value`` lines.

    All intermediate pairs are kept in memory, sorted by key. Returns the
    path of the output file; raises OSError when an input cannot be read.
    """
    intermediate = []
    for filename in filenames:
        with open(filename, encoding="utf-8") as source:
            content = source.read()
        intermediate.extend(mapf(str(filename), content))

    intermediate.sort(key=attrgetter("key"))

    out = Path(out_path)
    with open(out, "w", encoding="utf-8") as output:
        for key, group in groupby(intermediate, key=attrgetter("key")):
            result = reducef(key, [kv.value for kv in group])
            output.write(f"{key} {result}\n")
    return out


def main(argv: Optional[list[str]] = None) -> int:
    """Run an application over input files, writing ``mr-out-0``."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) < 2:
        print("Usage: mrsequential xxx.so inputfiles...", file=sys.stderr)
        return 1

    try:
        mapf, reducef = load_app(args[0])
    except LookupError:
        print(f"cannot load plugin {args[0]}", file=sys.stderr)
        return 1

    try:
        run_sequential(mapf, reducef, args[1:], _OUTPUT_NAME)
    except OSError as exc:
        print(f"cannot open {exc.filename}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())