"""Start a MapReduce worker that runs one application's tasks."""

from __future__ import annotations

import sys
from typing import Optional

from .mr.plugins import load_app
from .mr.worker import worker


def main(argv: Optional[list[str]] = None) -> int:
    """Run tasks from the master until it says the job is over."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 1:
        print("Usage: mrworker xxx.so", file=sys.stderr)
        return 1

    try:
        mapf, reducef = load_app(args[0])
    except LookupError:
        print(f"cannot load plugin {args[0]}", file=sys.stderr)
        return 1

    worker(mapf, reducef)
    return 0


if __name__ == "__main__":
    sys.exit(main())