"""Scan-and-process engine: collect the tree, then drain it with a worker pool."""

import logging
import threading
from pathlib import Path
from typing import Callable, Optional

from .collector import MAX_DEPTH, Predicate, collect
from .errors import SetupError
from .format import format_line
from .models import RunResult, WorkItem
from .pool import Classifier, Formatter, ResultHook, WorkerPool, worker_count
from .results import LogBuffer, ResultAggregator
from .workqueue import WorkQueue

logger = logging.getLogger(__name__)


def _check_root(root: Optional[Path]) -> Path:
    if root is None:
        try:
            return Path.cwd()
        except OSError as e:
            raise SetupError(f"cannot determine current directory: {e}") from e
    root = Path(root).expanduser()
    if not root.exists():
        raise SetupError(f"Path not found: {root}")
    if not (root.is_dir() or root.is_file()):
        raise SetupError(f"Not a directory or regular file: {root}")
    return root


def _collect_on_thread(root: Path, predicate: Predicate, max_depth: int) -> list[WorkItem]:
    """Run the collector on its own thread and wait for it."""
    box: dict[str, object] = {}

    def target() -> None:
        try:
            box["items"] = collect(root, predicate, max_depth=max_depth)
        except BaseException as e:  # handed back to the caller below
            box["error"] = e

    t = threading.Thread(target=target, name="treescan-collector", daemon=True)
    t.start()
    t.join()
    if "error" in box:
        raise box["error"]  # type: ignore[misc]
    items = box.get("items") or set()
    return sorted(items, key=lambda i: str(i.path), reverse=True)  # type: ignore[arg-type]


def run(
    root: Optional[Path],
    predicate: Predicate,
    classify: Classifier,
    *,
    workers: Optional[int] = None,
    max_depth: int = MAX_DEPTH,
    formatter: Formatter = format_line,
    on_result: Optional[ResultHook] = None,
    on_collected: Optional[Callable[[int], None]] = None,
) -> RunResult:
    """
    Collect every match under root, classify each exactly once, return the snapshot.

    Collection finishes before any worker starts. The queue is closed at that
    point, so a worker that finds it empty knows the run is over.
    """
    root = _check_root(root)
    n_workers = worker_count(workers)

    items = _collect_on_thread(root, predicate, max_depth)
    logger.debug("collected %d items under %s", len(items), root)

    queue: WorkQueue[WorkItem] = WorkQueue(items)
    queue.close()
    if on_collected is not None:
        on_collected(len(items))

    aggregator = ResultAggregator(total=len(items))
    log = LogBuffer()
    pool = WorkerPool(
        classify,
        aggregator,
        log,
        formatter=formatter,
        on_result=on_result,
        workers=n_workers,
    )
    if items:
        pool.drain(queue)

    counters = aggregator.snapshot()
    if not counters.is_complete():
        logger.warning("processed %d of %d items", counters.processed, counters.total)
    return RunResult(root=root, counters=counters, lines=log.lines(), flagged=pool.flagged, log=log)
