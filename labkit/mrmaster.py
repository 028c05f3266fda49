"""Start a MapReduce master for a set of input files and wait for the job."""

from __future__ import annotations

import sys
import time
from typing import Optional

from .mr.master import make_master

_N_REDUCE = 10


def main(argv: Optional[list[str]] = None) -> int:
    """Serve the job until every task is done; returns the exit status."""
    files = sys.argv[1:] if argv is None else list(argv)
    if not files:
        print("Usage: mrmaster inputfiles...", file=sys.stderr)
        return 1

    master = make_master(files, _N_REDUCE)
    try:
        while not master.done():
            time.sleep(1)
        time.sleep(1)
    finally:
        master.shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(main())