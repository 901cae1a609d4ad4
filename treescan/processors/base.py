"""Base type for processors: the per-item classifiers plugged into the engine."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from ..models import Outcome, OutcomeKind


@dataclass
class Processor:
    """A classifier plus everything the CLI needs to report on it."""

    name: str  # also the log file prefix
    title: str  # e.g. "Validation"
    noun: str  # e.g. "files"
    predicate: Callable[[Path], bool]
    classify: Callable[[Path], Outcome]
    summary_labels: dict = field(default_factory=lambda: {
        OutcomeKind.SUCCESS: "Succeeded",
        OutcomeKind.FAILED: "Failed",
        OutcomeKind.SKIPPED: "Skipped",
    })
    flag_prompt: Optional[str] = None  # None = no follow-up action offered
