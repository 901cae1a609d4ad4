"""Fixed-size worker pool draining a WorkQueue."""

import logging
import os
import threading
from pathlib import Path
from typing import Callable, Optional

from .errors import ItemProcessingError, SetupError
from .models import Outcome, OutcomeKind, WorkItem
from .results import LogBuffer, ResultAggregator
from .workqueue import WorkQueue

logger = logging.getLogger(__name__)

Classifier = Callable[[Path], Outcome]
Formatter = Callable[[WorkItem, Outcome], str]
ResultHook = Callable[[WorkItem, Outcome, str], None]


def worker_count(requested: Optional[int] = None) -> int:
    """Requested count, else CPU count, else 1."""
    if requested is not None:
        if requested < 1:
            raise SetupError(f"need at least one worker, got {requested}")
        return requested
    try:
        cores = os.cpu_count()
    except NotImplementedError:
        cores = None
    return cores if cores and cores > 0 else 1


def safe_classify(classify: Classifier, item: WorkItem) -> Outcome:
    """Run classify; anything it raises becomes a Failed outcome."""
    try:
        outcome = classify(item.path)
        if not isinstance(outcome, Outcome):
            raise ItemProcessingError(f"classifier returned {type(outcome).__name__}, not Outcome")
        return outcome
    except ItemProcessingError as e:
        logger.debug("processing %s failed", item.path, exc_info=True)
        return Outcome.failed(str(e))
    except Exception as e:
        logger.debug("processing %s failed", item.path, exc_info=True)
        return Outcome.failed(f"{type(e).__name__}: {e}")


class WorkerPool:
    """
    W threads, each popping items until the queue reports it is drained.

    Counters, the log and the flagged list are the only shared state; each is
    touched under its own lock, and on_result (printing) runs outside all of
    them.
    """

    def __init__(
        self,
        classify: Classifier,
        aggregator: ResultAggregator,
        log: LogBuffer,
        formatter: Formatter,
        on_result: Optional[ResultHook] = None,
        workers: Optional[int] = None,
    ) -> None:
        self.classify = classify
        self.aggregator = aggregator
        self.log = log
        self.formatter = formatter
        self.on_result = on_result
        self.workers = worker_count(workers)
        self._flagged: list[WorkItem] = []
        self._flagged_lock = threading.Lock()

    @property
    def flagged(self) -> list[WorkItem]:
        with self._flagged_lock:
            return list(self._flagged)

    def _handle(self, item: WorkItem) -> None:
        outcome = safe_classify(self.classify, item)
        self.aggregator.record(outcome)
        if outcome.kind == OutcomeKind.FAILED:
            with self._flagged_lock:
                self._flagged.append(item)
        try:
            line = self.formatter(item, outcome)
        except Exception as e:
            line = f"[{outcome.kind.value}] {item.relative}"
            logger.debug("formatter failed on %s: %s", item.path, e)
        if self.on_result is not None:
            try:
                self.on_result(item, outcome, line)
            except Exception as e:
                logger.warning("result hook failed on %s: %s", item.path, e)
        self.log.append(line)

    def _work(self, queue: WorkQueue) -> None:
        while True:
            item = queue.pop()
            if item is None:
                return
            self._handle(item)

    def drain(self, queue: WorkQueue) -> None:
        """Start the workers, block until every one of them has seen the end of the queue."""
        threads = [
            threading.Thread(target=self._work, args=(queue,), name=f"treescan-worker-{i}", daemon=True)
            for i in range(self.workers)
        ]
        logger.debug("starting %d workers", len(threads))
        for t in threads:
            t.start()
        for t in threads:
            t.join()
