"""Tests for the worker pool."""

import threading
from pathlib import Path
from unittest.mock import patch

import pytest

from treescan.errors import SetupError
from treescan.format import format_line
from treescan.models import Outcome, OutcomeKind, WorkItem
from treescan.pool import WorkerPool, safe_classify, worker_count
from treescan.results import LogBuffer, ResultAggregator
from treescan.workqueue import WorkQueue


def _items(n):
    root = Path("/scan")
    return [WorkItem(path=root / f"f{i}.zip", root=root) for i in range(n)]


def _pool(classify, workers, **kw):
    agg = ResultAggregator(total=kw.pop("total", 0))
    log = LogBuffer()
    return WorkerPool(classify, agg, log, formatter=format_line, workers=workers, **kw), agg, log


def test_worker_count_requested():
    assert worker_count(3) == 3
    with pytest.raises(SetupError):
        worker_count(0)


def test_worker_count_falls_back_to_one():
    """Undeterminable CPU count means exactly one worker."""
    with patch("treescan.pool.os.cpu_count", return_value=None):
        assert worker_count() == 1
    with patch("treescan.pool.os.cpu_count", return_value=6):
        assert worker_count() == 6


@pytest.mark.parametrize("workers", [1, 2, 8, 32])
def test_each_item_processed_exactly_once(workers):
    items = _items(500)
    calls = []
    lock = threading.Lock()

    def classify(path):
        with lock:
            calls.append(path)
        return Outcome.success()

    pool, agg, log = _pool(classify, workers, total=len(items))
    q = WorkQueue(items)
    q.close()
    pool.drain(q)
    assert sorted(calls) == sorted(i.path for i in items)
    assert len(set(calls)) == len(items)
    assert agg.snapshot().success == 500
    assert len(log) == 500


def test_classifier_exception_becomes_failed():
    """A raising classifier fails that item only; the others still run."""
    items = _items(4)

    def classify(path):
        if path.name == "f2.zip":
            raise ValueError("kaboom")
        return Outcome.success()

    pool, agg, log = _pool(classify, 2, total=4)
    q = WorkQueue(items)
    q.close()
    pool.drain(q)
    c = agg.snapshot()
    assert (c.success, c.failed) == (3, 1)
    assert [i.path.name for i in pool.flagged] == ["f2.zip"]
    assert any("ValueError: kaboom" in ln for ln in log.lines())


def test_safe_classify_rejects_non_outcome():
    item = _items(1)[0]
    out = safe_classify(lambda p: "ok", item)
    assert out.kind == OutcomeKind.FAILED
    assert "not Outcome" in out.detail


def test_on_result_called_per_item():
    items = _items(10)
    seen = []
    lock = threading.Lock()

    def hook(item, outcome, line):
        with lock:
            seen.append(line)

    pool, agg, log = _pool(lambda p: Outcome.skipped("y"), 4, total=10, on_result=hook)
    q = WorkQueue(items)
    q.close()
    pool.drain(q)
    assert sorted(seen) == sorted(log.lines())
    assert agg.snapshot().skipped == 10


def test_hook_failure_does_not_lose_result():
    items = _items(3)

    def hook(item, outcome, line):
        raise OSError("stdout closed")

    pool, agg, log = _pool(lambda p: Outcome.success(), 2, total=3, on_result=hook)
    q = WorkQueue(items)
    q.close()
    pool.drain(q)
    assert agg.snapshot().success == 3
    assert len(log) == 3
