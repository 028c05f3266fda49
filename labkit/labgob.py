"""Value encoding for RPC and persistence that warns about common mistakes.

Values are written one per line as tagged JSON. Dataclass fields whose names
start with an underscore are not transmitted, and the first time such a type
is seen a warning is printed. Decoding into an object that already holds
non-default values also produces a warning.
"""

from __future__ import annotations

import base64
import dataclasses
import enum
import json
import threading
from typing import Any, BinaryIO

_lock = threading.Lock()
_error_count = 0
_checked: set[type] = set()
_types_by_name: dict[str, type] = {}
_names_by_type: dict[type, str] = {}


def error_count() -> int:
    """Number of warnings and errors reported so far."""
    with _lock:
        return _error_count


def _bump_errors() -> int:
    global _error_count
    with _lock:
        before = _error_count
        _error_count += 1
    return before


def _default_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


def _check_type(cls: type) -> None:
    with _lock:
        if cls in _checked:
            return
        _checked.add(cls)
    if dataclasses.is_dataclass(cls):
        for f in dataclasses.fields(cls):
            if f.name.startswith("_"):
                print(
                    f"labgob error: private field {f.name} of {cls.__name__} "
                    "in RPC or persist/snapshot will not be transmitted"
                )
                _bump_errors()


def _register(name: str, cls: type) -> None:
    if not (dataclasses.is_dataclass(cls) or issubclass(cls, enum.Enum)):
        raise TypeError(f"labgob: cannot register {cls.__name__}: not a dataclass or enum")
    _check_type(cls)
    with _lock:
        existing = _types_by_name.get(name)
        if existing is not None and existing is not cls:
            raise ValueError(f"labgob: name {name!r} is already registered for another type")
        _types_by_name[name] = cls
        _names_by_type[cls] = name


def _as_type(value: Any) -> type:
    return value if isinstance(value, type) else type(value)


def register(value: Any) -> None:
    """Register a dataclass or enum (a class or an instance) under its own name."""
    cls = _as_type(value)
    _register(_default_name(cls), cls)


def register_name(name: str, value: Any) -> None:
    """Register a dataclass or enum under ``name``."""
    _register(name, _as_type(value))


def _name_for(cls: type) -> str:
    with _lock:
        name = _names_by_type.get(cls)
        if name is None:
            name = _default_name(cls)
            _names_by_type[cls] = name
            _types_by_name[name] = cls
        return name


def _lookup(name: str) -> type:
    with _lock:
        cls = _types_by_name.get(name)
    if cls is None:
        raise ValueError(f"labgob: type {name!r} is not registered")
    return cls


def _to_tree(value: Any) -> Any:
    if isinstance(value, enum.Enum):
        return {"$e": _name_for(type(value)), "v": _to_tree(value.value)}
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (bytes, bytearray)):
        return {"$b": base64.b64encode(bytes(value)).decode("ascii")}
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        cls = type(value)
        _check_type(cls)
        return {
            "$o": _name_for(cls),
            "f": {
                f.name: _to_tree(getattr(value, f.name))
                for f in dataclasses.fields(cls)
                if not f.name.startswith("_")
            },
        }
    if isinstance(value, list):
        return [_to_tree(item) for item in value]
    if isinstance(value, tuple):
        return {"$t": [_to_tree(item) for item in value]}
    if isinstance(value, (set, frozenset)):
        return {"$s": [_to_tree(item) for item in value]}
    if isinstance(value, dict):
        return {"$d": [[_to_tree(k), _to_tree(v)] for k, v in value.items()]}
    raise TypeError(f"labgob: cannot encode value of type {type(value).__name__}")


def _build(cls: type, values: dict[str, Any]) -> Any:
    obj = object.__new__(cls)
    for f in dataclasses.fields(cls):
        if f.name in values:
            item = values[f.name]
        elif f.default is not dataclasses.MISSING:
            item = f.default
        elif f.default_factory is not dataclasses.MISSING:
            item = f.default_factory()
        else:
            item = None
        object.__setattr__(obj, f.name, item)
    return obj


def _from_tree(node: Any) -> Any:
    if isinstance(node, list):
        return [_from_tree(item) for item in node]
    if not isinstance(node, dict):
        return node
    if "$o" in node:
        cls = _lookup(node["$o"])
        if not dataclasses.is_dataclass(cls):
            raise ValueError(f"labgob: {node['$o']!r} does not name a dataclass")
        return _build(cls, {k: _from_tree(v) for k, v in node.get("f", {}).items()})
    if "$e" in node:
        cls = _lookup(node["$e"])
        if not issubclass(cls, enum.Enum):
            raise ValueError(f"labgob: {node['$e']!r} does not name an enum")
        return cls(_from_tree(node["v"]))
    if "$b" in node:
        return base64.b64decode(node["$b"])
    if "$t" in node:
        return tuple(_from_tree(item) for item in node["$t"])
    if "$s" in node:
        return {_from_tree(item) for item in node["$s"]}
    if "$d" in node:
        return {_from_tree(k): _from_tree(v) for k, v in node["$d"]}
    raise ValueError("labgob: malformed data")


def _check_default(value: Any, depth: int = 1, name: str = "") -> None:
    if depth > 3 or value is None:
        return
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        for f in dataclasses.fields(type(value)):
            child = f"{name}.{f.name}" if name else f.name
            _check_default(getattr(value, f.name, None), depth + 1, child)
        return
    raw = value.value if isinstance(value, enum.Enum) else value
    if isinstance(raw, (bool, int, float, str)) and raw != type(raw)():
        # typically a reused reply object, or persisted state restored
        # into variables that already hold values
        if _bump_errors() < 1:
            what = name or type(value).__name__
            print(f"labgob warning: Decoding into a non-default variable/field {what} may not work")


class LabEncoder:
    """Writes values to a binary stream, one per line."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    def encode(self, value: Any) -> None:
        """Write ``value``; raise TypeError if it cannot be encoded."""
        line = json.dumps(_to_tree(value), separators=(",", ":"))
        self._stream.write(line.encode("utf-8") + b"\n")


class LabDecoder:
    """Reads values written by a LabEncoder, in order."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    def _read(self) -> Any:
        line = self._stream.readline()
        if not line:
            raise EOFError("labgob: no more values")
        try:
            tree = json.loads(line)
        except json.JSONDecodeError as exc:
            raise ValueError("labgob: malformed data") from exc
        return _from_tree(tree)

    def decode(self) -> Any:
        """Return the next value; raise EOFError when there is none."""
        return self._read()

    def decode_into(self, target: Any) -> Any:
        """Read the next value into ``target`` (a dataclass, list, dict or set)."""
        is_object = dataclasses.is_dataclass(target) and not isinstance(target, type)
        if not (is_object or isinstance(target, (list, dict, set))):
            raise TypeError(f"labgob: cannot decode into {type(target).__name__}")
        _check_type(type(target))
        _check_default(target)
        value = self._read()
        if is_object:
            if type(value) is not type(target):
                raise TypeError(
                    f"labgob: cannot decode {type(value).__name__} into {type(target).__name__}"
                )
            for f in dataclasses.fields(type(target)):
                if not f.name.startswith("_"):
                    object.__setattr__(target, f.name, getattr(value, f.name))
        elif isinstance(target, list):
            if not isinstance(value, list):
                raise TypeError(f"labgob: cannot decode {type(value).__name__} into list")
            target[:] = value
        elif isinstance(target, dict):
            if not isinstance(value, dict):
                raise TypeError(f"labgob: cannot decode {type(value).__name__} into dict")
            target.clear()
            target.update(value)
        else:
            if not isinstance(value, set):
                raise TypeError(f"labgob: cannot decode {type(value).__name__} into set")
            target.clear()
            target.update(value)
        return target