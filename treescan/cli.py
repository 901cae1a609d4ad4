"""CLI entry point: scan a folder, process matches in parallel, report."""

import logging
import sys
from pathlib import Path
from typing import List, Optional

import click
import typer

from .config import Settings, load_settings
from .engine import run
from .errors import ConfigError, PersistenceError, SetupError
from .format import style_line, styled_summary, summary_lines
from .gate import confirm_and_act, delete_file
from .models import ActionResult, Outcome, RunResult, WorkItem
from .processors import Processor, git_processor, zip_processor
from .processors.git_pull import git_available
from .results import resolve_log_path


def _err(msg: str) -> None:
    """Raise a styled error (red box): used for all CLI errors."""
    raise typer.BadParameter(msg)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _settings(config: Optional[Path], workers: Optional[int]) -> Settings:
    try:
        settings = load_settings(config)
    except ConfigError as e:
        _err(str(e))
    if workers is not None:
        settings.workers = workers
    return settings


def _echo_result(item: WorkItem, outcome: Outcome, line: str) -> None:
    typer.echo(style_line(line, outcome))


def _ask(message: str) -> bool:
    try:
        return typer.confirm(click.style(message, fg="yellow"), default=False)
    except typer.Abort:
        return False


def _echo_action(r: ActionResult) -> None:
    if r.ok:
        typer.echo(click.style(f"🗑️ Deleted corrupted file: {r.item.path}", fg="green"))
    else:
        typer.echo(click.style(f"❌ Failed to delete file {r.item.path}: {r.error}", fg="red"))


def _write_log(result: RunResult, processor: Processor, target: Optional[Path]) -> None:
    path = resolve_log_path(target, processor.name)
    try:
        result.log.flush(path, summary_lines(result.counters, processor))
    except PersistenceError as e:
        typer.echo(click.style(f"❌ Failed to save log file: {e}", fg="red"))
        return
    typer.echo(click.style(f"📝 Log file saved successfully at: {path}", fg="green"))


def _run_tool(processor: Processor, path: Optional[Path], settings: Settings, on_collected) -> RunResult:
    try:
        return run(
            path,
            processor.predicate,
            processor.classify,
            workers=settings.workers,
            max_depth=settings.max_depth,
            on_result=_echo_result,
            on_collected=on_collected,
        )
    except SetupError as e:
        _err(str(e))


def zip_cmd(
    path: Optional[Path] = typer.Argument(None, help="Folder to operate on (default: .)"),
    log: Optional[Path] = typer.Option(None, "--log", "-l", help="Log file (or folder) to write results to"),
    save_log: bool = typer.Option(False, "--save-log", "-s", help="Write the log to an auto-named file in ."),
    extensions: Optional[List[str]] = typer.Option(None, "--ext", "-x", help="Archive suffix to check (repeatable, default .zip)"),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", min=1, help="Worker threads (default: CPU count)"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Delete corrupted archives without asking"),
    ci: bool = typer.Option(False, "--ci", help="Exit 1 if any archive is corrupted"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Settings YAML (default: ./treescan.yaml)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr"),
) -> None:
    """Check the integrity of every ZIP archive below a folder."""
    _setup_logging(verbose)
    settings = _settings(config, workers)
    processor = zip_processor(extensions or settings.extensions)
    root = (path or Path.cwd()).expanduser()

    suffixes = ", ".join(sorted({e.lstrip(".").upper() for e in (extensions or settings.extensions)}))

    def announce(count: int) -> None:
        typer.echo(click.style(f"🔍 Recursively checking all {suffixes} files in ({root})...", fg="yellow"))

    result = _run_tool(processor, root, settings, announce)

    typer.echo()
    typer.echo(styled_summary(result.counters, processor))

    if log is not None or save_log:
        _write_log(result, processor, log)

    typer.echo()
    prompt = (lambda _msg: True) if yes else _ask
    confirm_and_act(result.flagged, delete_file, prompt, processor.flag_prompt, on_result=_echo_action)

    if ci and result.counters.failed:
        raise typer.Exit(1)


def sync_cmd(
    path: Optional[Path] = typer.Argument(None, help="Folder to operate on (default: .)"),
    log: Optional[Path] = typer.Option(None, "--log", "-l", help="Log file (or folder) to write results to"),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", min=1, help="Worker threads (default: CPU count)"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Settings YAML (default: ./treescan.yaml)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr"),
) -> None:
    """Pull every git repository below a folder."""
    _setup_logging(verbose)
    if not git_available():
        typer.echo(click.style("Error: 'git' command not found. Please install Git to use this tool.", fg="red"), err=True)
        raise typer.Exit(1)
    settings = _settings(config, workers)
    processor = git_processor()
    root = (path or Path.cwd()).expanduser()

    def announce(count: int) -> None:
        if count == 0:
            typer.echo(click.style(f"No Git repositories found in {root}", fg="yellow"))
        else:
            typer.echo(click.style(f"Found {count} repositories. Starting sync...\n", fg="green"))

    result = _run_tool(processor, root, settings, announce)
    if result.counters.total == 0:
        return

    typer.echo()
    typer.echo(styled_summary(result.counters, processor))
    if log is not None:
        _write_log(result, processor, log)
    typer.echo(click.style("\n✅ All repositories synced!", fg="green"))


app = typer.Typer(help="Scan a folder tree and process every match in parallel.")
app.command("zip")(zip_cmd)
app.command("sync")(sync_cmd)

# Single-command apps behind the check-zip / git-sync scripts
check_zip_app = typer.Typer(help="A tool for checking integrity of zip archives.")
check_zip_app.command()(zip_cmd)

git_sync_app = typer.Typer(help="A tool for synchronizing git repositories.")
git_sync_app.command()(sync_cmd)
