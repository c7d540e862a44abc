"""
Unit tests for concurrent fan-out.
"""
import threading
import pytest
from devbox.MANAGERS.fan_out import FanOut


def test_results_follow_input_order():
    results = FanOut().map(lambda item: item, ["c", "a", "b"])
    assert [r.name for r in results] == ["c", "a", "b"]
    assert all(r.success for r in results)


def test_one_failure_does_not_affect_siblings(capsys):
    seen = []
    lock = threading.Lock()

    def operation(item):
        with lock:
            seen.append(item)
        if item == "b":
            raise RuntimeError("clone failed")

    results = FanOut().map(operation, ["a", "b", "c", "d"])
    assert sorted(seen) == ["a", "b", "c", "d"]
    assert [r.success for r in results] == [True, False, True, True]
    assert results[1].reason == "clone failed"
    assert "b: clone failed" in capsys.readouterr().err


def test_units_run_concurrently():
    barrier = threading.Barrier(3, timeout=5)
    results = FanOut(max_workers=3).map(lambda item: barrier.wait(), [1, 2, 3])
    assert all(r.success for r in results)


def test_empty_collection():
    assert FanOut().map(lambda item: item, []) == []


@pytest.mark.parametrize("workers", [1, 2])
def test_custom_names(workers):
    results = FanOut(max_workers=workers).map(lambda item: None, [{"id": 1}], name_of=lambda i: f"svc-{i['id']}")
    assert results[0].name == "svc-1"
