"""Tests for the closable work queue."""

import threading

import pytest

from treescan.errors import QueueClosed
from treescan.workqueue import WorkQueue


def test_pop_until_closed_and_drained():
    """Every item comes out once; then None."""
    q = WorkQueue([1, 2, 3])
    q.close()
    got = [q.pop(), q.pop(), q.pop()]
    assert sorted(got) == [1, 2, 3]
    assert q.pop() is None
    assert q.pop() is None
    assert len(q) == 0


def test_put_after_close_raises():
    q = WorkQueue()
    q.close()
    with pytest.raises(QueueClosed):
        q.put(1)


def test_pop_waits_for_close():
    """An open empty queue holds consumers until the producer closes it."""
    q = WorkQueue()
    seen = []

    def consumer():
        while True:
            item = q.pop()
            if item is None:
                return
            seen.append(item)

    t = threading.Thread(target=consumer)
    t.start()
    for i in range(10):
        q.put(i)
    q.close()
    t.join(timeout=5)
    assert not t.is_alive()
    assert sorted(seen) == list(range(10))


def test_concurrent_consumers_no_duplicates():
    """Many threads draining one queue never see the same item twice."""
    n = 2000
    q = WorkQueue(range(n))
    q.close()
    seen = []
    lock = threading.Lock()

    def consumer():
        while True:
            item = q.pop()
            if item is None:
                return
            with lock:
                seen.append(item)

    threads = [threading.Thread(target=consumer) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert sorted(seen) == list(range(n))
