import json
import os
import shutil
import tempfile

import pytest

from labkit.mr.master import make_master
from labkit.mr.rpc import GetTaskArgs, ihash
from labkit.mr.worker import call, call_example, run_map, run_reduce, worker
from labkit.mrapps import wc


@pytest.fixture
def sockname():
    directory = tempfile.mkdtemp(dir="/tmp")
    yield os.path.join(directory, "mr.sock")
    shutil.rmtree(directory, ignore_errors=True)


def _read_pairs(path):
    with open(path, encoding="utf-8") as f:
        return [json.loads(line) for line in f if line.strip()]


def test_run_map_buckets_by_hash(tmp_path):
    source = tmp_path / "in.txt"
    source.write_text("alpha beta gamma delta alpha epsilon")
    outputs = [str(tmp_path / f"mr-0-{r}") for r in range(3)]
    run_map(wc.map_function, [str(source)], outputs)
    total = 0
    for bucket, path in enumerate(outputs):
        assert os.path.exists(path)
        for record in _read_pairs(path):
            assert ihash(record["Key"]) % 3 == bucket
            assert record["Value"] == "1"
            total += 1
    assert total == len(wc.map_function("", source.read_text()))


def test_map_then_reduce_counts_words(tmp_path):
    source = tmp_path / "in.txt"
    source.write_text("a b a")
    intermediate = [str(tmp_path / f"mr-0-{r}") for r in range(2)]
    run_map(wc.map_function, [str(source)], intermediate)
    outputs = []
    for r in range(2):
        out = str(tmp_path / f"mr-out-{r}")
        run_reduce(wc.reduce_function, [intermediate[r]], [out])
        outputs.append(out)
    lines = sorted(
        line for out in outputs for line in open(out, encoding="utf-8").read().splitlines()
    )
    assert lines == ["a 2", "b 1"]


def test_reduce_output_is_sorted_by_key(tmp_path):
    source = tmp_path / "in.txt"
    source.write_text("zeta alpha mid alpha zeta")
    inter = str(tmp_path / "mr-0-0")
    run_map(wc.map_function, [str(source)], [inter])
    out = str(tmp_path / "mr-out-0")
    run_reduce(wc.reduce_function, [inter], [out])
    keys = [line.split(" ")[0] for line in open(out, encoding="utf-8").read().splitlines()]
    assert keys == sorted(set(keys))
    assert keys == sorted({"zeta", "alpha", "mid"})


def test_run_map_missing_input_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        run_map(wc.map_function, [str(tmp_path / "absent")], [str(tmp_path / "o")])


def test_run_reduce_missing_input_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        run_reduce(wc.reduce_function, [str(tmp_path / "absent")], [str(tmp_path / "o")])


def test_call_example(sockname):
    master = make_master(["x.txt"], 1, sockname)
    try:
        assert call_example(sockname) == 100
    finally:
        master.shutdown()


def test_call_unknown_method_returns_none(sockname):
    master = make_master(["x.txt"], 1, sockname)
    try:
        assert call("Master.Nothing", GetTaskArgs(), sockname) is None
    finally:
        master.shutdown()


def test_call_without_master_raises(sockname):
    with pytest.raises(OSError):
        call("Master.GetTask", GetTaskArgs(), sockname)


def test_worker_runs_whole_job(tmp_path, monkeypatch, sockname):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "one.txt").write_text("a b")
    (tmp_path / "two.txt").write_text("a a c")
    master = make_master(["one.txt", "two.txt"], 2, sockname)
    try:
        worker(wc.map_function, wc.reduce_function, sockname)
        assert master.done()
        lines = sorted(
            line
            for r in range(2)
            for line in (tmp_path / f"mr-out-{r}").read_text().splitlines()
        )
        assert lines == ["a 3", "b 1", "c 1"]
    finally:
        master.shutdown()