import enum
import io
from dataclasses import dataclass, field
from typing import Any

import pytest

from labkit import labgob
from labkit.labgob import LabDecoder, LabEncoder


@dataclass
class T1:
    t1int0: int = 0
    t1int1: int = 0
    t1string0: str = ""
    t1string1: str = ""


@dataclass
class T2:
    t2slice: list = field(default_factory=list)
    t2map: dict = field(default_factory=dict)
    t2t3: Any = None


@dataclass
class T3:
    t3int999: int = 0


@dataclass(frozen=True)
class T4:
    yes: int = 0
    _no: int = 0


class Color(enum.Enum):
    RED = "red"
    BLUE = "blue"


@dataclass
class Shape:
    sides: int = 0


@dataclass
class Other:
    size: int = 0


def _roundtrip(*values):
    stream = io.BytesIO()
    encoder = LabEncoder(stream)
    for value in values:
        encoder.encode(value)
    decoder = LabDecoder(io.BytesIO(stream.getvalue()))
    return [decoder.decode() for _ in values]


def test_gob():
    e0 = labgob.error_count()
    labgob.register(T3())

    t1 = T1(t1int1=1, t1string1="6.824")
    t2 = T2(t2slice=[T1(), t1], t2map={99: T1(1, 2, "x", "y")}, t2t3=T3(999))

    x0, x1, d1, d2 = _roundtrip(0, 1, t1, t2)

    assert x0 == 0
    assert x1 == 1
    assert d1.t1int0 == 0
    assert d1.t1int1 == 1
    assert d1.t1string0 == ""
    assert d1.t1string1 == "6.824"
    assert len(d2.t2slice) == 2
    assert d2.t2slice[1].t1int1 == 1
    assert len(d2.t2map) == 1
    assert d2.t2map[99].t1string1 == "y"
    assert isinstance(d2.t2t3, T3)
    assert d2.t2t3.t3int999 == 999
    assert labgob.error_count() == e0


def test_capital():
    e0 = labgob.error_count()
    (decoded,) = _roundtrip([{T4(1, 2): 5}])
    assert labgob.error_count() == e0 + 1
    ((key, count),) = decoded[0].items()
    assert key.yes == 1
    assert key._no == 0  # private fields are not transmitted
    assert count == 5


def test_default():
    e0 = labgob.error_count()

    @dataclass
    class DD:
        x: int = 0

    stream = io.BytesIO()
    LabEncoder(stream).encode(DD())
    reply = DD(99)
    LabDecoder(io.BytesIO(stream.getvalue())).decode_into(reply)

    assert labgob.error_count() == e0 + 1
    assert reply.x == 0


def test_no_warning_for_default_target():
    e0 = labgob.error_count()
    stream = io.BytesIO()
    LabEncoder(stream).encode(T1(t1int1=5))
    target = T1()
    LabDecoder(io.BytesIO(stream.getvalue())).decode_into(target)
    assert target == T1(t1int1=5)
    assert labgob.error_count() == e0


def test_containers_bytes_and_enums_round_trip():
    values = [b"\x00\xffdata", (1, "a"), {"k", "j"}, {(1, 2): [None, True]}, Color.BLUE, 2.5]
    assert _roundtrip(*values) == values


def test_decode_at_end_raises_eof():
    with pytest.raises(EOFError):
        LabDecoder(io.BytesIO(b"")).decode()


def test_unknown_type_name_is_rejected():
    stream = io.BytesIO(b'{"$o":"nowhere.Missing","f":{}}\n')
    with pytest.raises(ValueError):
        LabDecoder(stream).decode()


def test_malformed_line_is_rejected():
    with pytest.raises(ValueError):
        LabDecoder(io.BytesIO(b"{not json\n")).decode()


def test_unsupported_value_is_rejected():
    with pytest.raises(TypeError):
        LabEncoder(io.BytesIO()).encode(object())


def test_register_name_conflict():
    labgob.register_name("tests.shape-name", Shape)
    labgob.register_name("tests.shape-name", Shape())
    with pytest.raises(ValueError):
        labgob.register_name("tests.shape-name", Other)
    assert _roundtrip(Shape(4)) == [Shape(4)]


def test_register_rejects_plain_types():
    with pytest.raises(TypeError):
        labgob.register(42)


def test_decode_into_type_mismatch():
    stream = io.BytesIO()
    LabEncoder(stream).encode(T3(1))
    with pytest.raises(TypeError):
        LabDecoder(io.BytesIO(stream.getvalue())).decode_into(T1())


def test_decode_into_list_and_dict():
    stream = io.BytesIO()
    encoder = LabEncoder(stream)
    encoder.encode([1, 2])
    encoder.encode({3: "c"})
    decoder = LabDecoder(io.BytesIO(stream.getvalue()))
    target_list = [9]
    target_dict = {"old": "x"}
    assert decoder.decode_into(target_list) is target_list
    decoder.decode_into(target_dict)
    assert target_list == [1, 2]
    assert target_dict == {3: "c"}


def test_decode_into_unsupported_target():
    with pytest.raises(TypeError):
        LabDecoder(io.BytesIO(b"1\n")).decode_into(5)