"""Terminal and log-file output: result lines, colors, summary block."""

from typing import List

import click

from .models import AggregateCounters, Outcome, OutcomeKind, WorkItem

SEPARATOR = "=" * 56

DEFAULT_ICONS = {
    OutcomeKind.SUCCESS: "✅",
    OutcomeKind.SKIPPED: "⏭️",
    OutcomeKind.FAILED: "❌",
    OutcomeKind.UNSUPPORTED: "⏭️",
}

_COLORS = {
    OutcomeKind.SUCCESS: "green",
    OutcomeKind.SKIPPED: "yellow",
    OutcomeKind.FAILED: "red",
    OutcomeKind.UNSUPPORTED: "yellow",
}


def kind_color(kind: OutcomeKind) -> str:
    return _COLORS.get(kind, "white")


def format_line(item: WorkItem, outcome: Outcome) -> str:
    """Plain log line: '<icon> [<LABEL>] <relative path>[ - <detail>]'."""
    icon = outcome.icon or DEFAULT_ICONS.get(outcome.kind, "•")
    label = outcome.label or outcome.kind.value
    line = f"{icon} [{label}] {item.relative}"
    if outcome.kind == OutcomeKind.FAILED and outcome.detail:
        line = f"{line} - {outcome.detail}"
    return line


def style_line(line: str, outcome: Outcome) -> str:
    return click.style(line, fg=kind_color(outcome.kind))


def summary_lines(counters: AggregateCounters, processor) -> List[str]:
    """Summary block shared by the terminal and the log trailer."""
    labels = processor.summary_labels
    return [
        SEPARATOR,
        f"📊 {processor.title} Complete - Summary Statistics:",
        f"   Total {processor.noun} checked: {counters.total}",
        f"✅ {labels[OutcomeKind.SUCCESS]}: {counters.success}",
        f"❌ {labels[OutcomeKind.FAILED]}: {counters.failed}",
        f"⏭️ {labels[OutcomeKind.SKIPPED]}: {counters.skipped}",
    ]


def styled_summary(counters: AggregateCounters, processor) -> str:
    """Colored version of summary_lines for the terminal."""
    lines = summary_lines(counters, processor)
    colors = [None, "yellow", None, "green", "red", "yellow"]
    out = []
    for ln, color in zip(lines, colors):
        out.append(click.style(ln, fg=color) if color else ln)
    return "\n".join(out)

