"""Work items, outcomes and run snapshots."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .results import LogBuffer


class OutcomeKind(str, Enum):
    SUCCESS = "SUCCESS"
    SKIPPED = "SKIPPED"
    FAILED = "FAILED"
    UNSUPPORTED = "UNSUPPORTED"  # reserved, no processor emits it


@dataclass(frozen=True)
class WorkItem:
    """A discovered path slated for processing."""

    path: Path
    root: Path

    @property
    def relative(self) -> Path:
        try:
            return self.path.relative_to(self.root)
        except ValueError:
            return self.path


@dataclass(frozen=True)
class Outcome:
    """Result of classifying one WorkItem."""

    kind: OutcomeKind
    detail: str = ""  # skip reason or failure message
    label: str = ""  # e.g. "VALID", "Up to Date"
    icon: str = ""

    @classmethod
    def success(cls, label: str = "", icon: str = "") -> "Outcome":
        return cls(OutcomeKind.SUCCESS, label=label, icon=icon)

    @classmethod
    def skipped(cls, reason: str, label: str = "", icon: str = "") -> "Outcome":
        return cls(OutcomeKind.SKIPPED, detail=reason, label=label, icon=icon)

    @classmethod
    def failed(cls, message: str, label: str = "", icon: str = "") -> "Outcome":
        return cls(OutcomeKind.FAILED, detail=message, label=label, icon=icon)

    @classmethod
    def unsupported(cls, label: str = "", icon: str = "") -> "Outcome":
        return cls(OutcomeKind.UNSUPPORTED, label=label, icon=icon)


@dataclass
class AggregateCounters:
    """Tally of outcomes across a run. Unsupported counts as skipped."""

    total: int = 0
    success: int = 0
    skipped: int = 0
    failed: int = 0

    @property
    def processed(self) -> int:
        return self.success + self.skipped + self.failed

    def is_complete(self) -> bool:
        return self.processed == self.total


@dataclass
class RunResult:
    """Post-join snapshot handed back by engine.run()."""

    root: Path
    counters: AggregateCounters
    lines: list[str] = field(default_factory=list)
    flagged: list[WorkItem] = field(default_factory=list)  # items whose outcome was FAILED
    log: Optional["LogBuffer"] = field(default=None, repr=False)  # flushed once by the caller


@dataclass
class ActionResult:
    """Per-item result of the post-action gate."""

    item: WorkItem
    ok: bool
    error: Optional[str] = None
