from labkit.kvmodel import (
    KV_MODEL,
    OP_APPEND,
    OP_GET,
    OP_PUT,
    KvInput,
    KvOutput,
    describe_operation,
    init_state,
    partition,
    step,
)
from labkit.porcupine.checker import check_operations
from labkit.porcupine.model import Operation


def _op(client, inp, call, out, ret):
    return Operation(client_id=client, input=inp, call=call, output=out, return_=ret)


def test_partition_groups_by_sorted_key_and_keeps_order():
    a1 = _op(0, KvInput(OP_PUT, "b", "1"), 0, KvOutput(), 1)
    a2 = _op(0, KvInput(OP_PUT, "a", "2"), 2, KvOutput(), 3)
    a3 = _op(1, KvInput(OP_GET, "b"), 4, KvOutput("1"), 5)
    assert partition([a1, a2, a3]) == [[a2], [a1, a3]]


def test_partition_of_empty_history():
    assert partition([]) == []


def test_init_state_is_empty():
    assert init_state() == ""


def test_step_get_put_append():
    assert step("v", KvInput(OP_GET, "k"), KvOutput("v")) == (True, "v")
    assert step("v", KvInput(OP_GET, "k"), KvOutput("w")) == (False, "v")
    assert step("old", KvInput(OP_PUT, "k", "new"), KvOutput()) == (True, "new")
    assert step("ab", KvInput(OP_APPEND, "k", "cd"), KvOutput()) == (True, "abcd")


def test_describe_operation_formats():
    assert describe_operation(KvInput(OP_GET, "k"), KvOutput("v")) == "get('k') -> 'v'"
    assert describe_operation(KvInput(OP_PUT, "k", "v"), KvOutput()) == "put('k', 'v')"
    assert describe_operation(KvInput(OP_APPEND, "k", "v"), KvOutput()) == "append('k', 'v')"
    assert describe_operation(KvInput(7, "k", "v"), KvOutput()) == "<invalid>"


def test_linearizable_history_passes():
    history = [
        _op(0, KvInput(OP_PUT, "x", "a"), 0, KvOutput(), 10),
        _op(1, KvInput(OP_APPEND, "x", "b"), 11, KvOutput(), 20),
        _op(2, KvInput(OP_GET, "x"), 21, KvOutput("ab"), 30),
    ]
    assert check_operations(KV_MODEL, history) is True


def test_stale_read_is_rejected():
    history = [
        _op(0, KvInput(OP_PUT, "x", "a"), 0, KvOutput(), 10),
        _op(1, KvInput(OP_GET, "x"), 20, KvOutput("b"), 30),
    ]
    assert check_operations(KV_MODEL, history) is False


def test_independent_keys_checked_separately():
    history = [
        _op(0, KvInput(OP_PUT, "x", "1"), 0, KvOutput(), 10),
        _op(1, KvInput(OP_PUT, "y", "2"), 0, KvOutput(), 10),
        _op(0, KvInput(OP_GET, "y"), 20, KvOutput("2"), 30),
        _op(1, KvInput(OP_GET, "x"), 20, KvOutput("1"), 30),
    ]
    assert check_operations(KV_MODEL, history) is True