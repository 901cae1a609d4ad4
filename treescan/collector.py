"""Path collector: stack-based depth-first walk that never follows symlinks."""

import logging
import os
from pathlib import Path
from typing import Callable

from .errors import CollectionError
from .models import WorkItem

logger = logging.getLogger(__name__)

MAX_DEPTH = 50

Predicate = Callable[[Path], bool]


def _list_dir(path: Path) -> list[os.DirEntry]:
    """Read one directory. Any OS error becomes CollectionError."""
    try:
        with os.scandir(path) as it:
            return list(it)
    except OSError as e:
        raise CollectionError(f"cannot read {path}: {e}") from e


def _is_symlink(entry: os.DirEntry) -> bool:
    try:
        return entry.is_symlink()
    except OSError:
        return True


def _is_dir(entry: os.DirEntry) -> bool:
    try:
        return entry.is_dir(follow_symlinks=False)
    except OSError:
        return False


def _matches(predicate: Predicate, path: Path) -> bool:
    try:
        return bool(predicate(path))
    except Exception as e:
        logger.debug("predicate failed on %s: %s", path, e)
        return False


def collect(root: Path, predicate: Predicate, max_depth: int = MAX_DEPTH) -> set[WorkItem]:
    """
    Walk everything below root and return the entries matching predicate.

    A matching directory is emitted and not descended into. The root is
    entered even when it is a symlink, but symlinks below it are never
    followed. Unreadable directories are skipped and directories deeper
    than max_depth are not entered.
    """
    root = Path(root)
    found: set[WorkItem] = set()

    if root.is_file():
        if _matches(predicate, root):
            found.add(WorkItem(path=root, root=root.parent))
        return found

    stack: list[tuple[Path, int]] = [(root, 0)]
    while stack:
        current, depth = stack.pop()
        try:
            entries = _list_dir(current)
        except CollectionError as e:
            logger.debug("skipping: %s", e)
            continue
        for entry in entries:
            if _is_symlink(entry):
                continue
            path = Path(entry.path)
            if _matches(predicate, path):
                found.add(WorkItem(path=path, root=root))
                continue
            if not _is_dir(entry):
                continue
            if depth + 1 > max_depth:
                logger.warning("Maximum depth (%d) reached at %s", max_depth, path)
                continue
            stack.append((path, depth + 1))
    return found
