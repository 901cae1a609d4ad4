"""Closable work queue shared by the worker pool."""

import threading
from collections import deque
from typing import Generic, Iterable, Optional, TypeVar

from .errors import QueueClosed

T = TypeVar("T")


class WorkQueue(Generic[T]):
    """
    Multi-consumer channel with an explicit close signal.

    pop() hands out each item exactly once and returns None only after
    close() has been called and nothing is left, so consumers never mistake
    a momentarily empty queue for the end of the work.
    """

    def __init__(self, items: Iterable[T] = ()) -> None:
        self._items: deque[T] = deque(items)
        self._closed = False
        self._cond = threading.Condition()

    def put(self, item: T) -> None:
        with self._cond:
            if self._closed:
                raise QueueClosed("queue is closed")
            self._items.append(item)
            self._cond.notify()

    def close(self) -> None:
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    def pop(self) -> Optional[T]:
        """Next item, or None once closed and drained."""
        with self._cond:
            while not self._items and not self._closed:
                self._cond.wait()
            if self._items:
                return self._items.pop()
            return None

    def __len__(self) -> int:
        with self._cond:
            return len(self._items)
