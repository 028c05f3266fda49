"""Lookup of MapReduce applications by name."""

from __future__ import annotations

from pathlib import PurePath
from types import ModuleType

from ..mrapps import crash, indexer, mtiming, nocrash, rtiming, wc
from .worker import MapFunction, ReduceFunction

_APPS: dict[str, ModuleType] = {
    "wc": wc,
    "indexer": indexer,
    "crash": crash,
    "nocrash": nocrash,
    "mtiming": mtiming,
    "rtiming": rtiming,
}


def load_app(name: str) -> tuple[MapFunction, ReduceFunction]:
    """Return the map and reduce functions of the application ``name``.

    ``name`` may be a bare name such as ``wc`` or a path such as
    ``../mrapps/wc.so``; only the final component, without its suffix,
    selects the application. Raises LookupError for an unknown application.
    """
    app = _APPS.get(PurePath(name).stem)
    if app is None:
        raise LookupError(
            f"cannot load plugin {name}; expecting one of {sorted(_APPS)}"
        )
    return app.map_function, app.reduce_function