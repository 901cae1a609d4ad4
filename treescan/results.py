"""Thread-safe outcome counters and the per-run log buffer."""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Iterable

from .errors import PersistenceError
from .models import AggregateCounters, Outcome, OutcomeKind

logger = logging.getLogger(__name__)


class ResultAggregator:
    """Counters partitioned by outcome kind, one lock around every update."""

    def __init__(self, total: int = 0) -> None:
        self._counters = AggregateCounters(total=total)
        self._lock = threading.Lock()

    def record(self, outcome: Outcome) -> None:
        with self._lock:
            c = self._counters
            if outcome.kind == OutcomeKind.SUCCESS:
                c.success += 1
            elif outcome.kind == OutcomeKind.FAILED:
                c.failed += 1
            else:
                c.skipped += 1
            # Items recorded past the announced total still keep the sum invariant.
            if c.processed > c.total:
                c.total = c.processed

    def snapshot(self) -> AggregateCounters:
        """Copy of the counters. Only meaningful once the pool has joined."""
        with self._lock:
            return replace(self._counters)


class LogBuffer:
    """Append-only line buffer, flushed to disk at most once."""

    def __init__(self) -> None:
        self._lines: list[str] = []
        self._lock = threading.Lock()
        self._flushed = False

    def append(self, line: str) -> None:
        with self._lock:
            self._lines.append(line)

    def lines(self) -> list[str]:
        with self._lock:
            return list(self._lines)

    def __len__(self) -> int:
        with self._lock:
            return len(self._lines)

    @property
    def flushed(self) -> bool:
        return self._flushed

    def flush(self, path: Path, trailer: Iterable[str] = ()) -> Path:
        """Write all lines plus trailer to path (overwrite). Raises PersistenceError."""
        if self._flushed:
            raise PersistenceError("log already written")
        content = "".join(f"{ln}\n" for ln in [*self.lines(), *trailer])
        path = Path(path)
        try:
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"cannot write {path}: {e}") from e
        self._flushed = True
        logger.debug("wrote %d bytes to %s", len(content), path)
        return path


def default_log_name(prefix: str, now: datetime | None = None) -> str:
    """e.g. check-zip_20260119143005123.log"""
    now = now or datetime.now()
    return f"{prefix}_{now.strftime('%Y%m%d%H%M%S')}{now.microsecond // 1000:03d}.log"


def resolve_log_path(target: Path | None, prefix: str, now: datetime | None = None) -> Path:
    """None -> auto name in cwd, existing dir -> auto name inside it, else target."""
    name = default_log_name(prefix, now)
    if target is None:
        return Path(name)
    target = Path(target)
    if target.is_dir():
        return target / name
    return target
