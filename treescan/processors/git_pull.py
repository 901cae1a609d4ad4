"""git-sync: pull every repository found, without ever prompting for credentials."""

import os
import shutil
import subprocess
from pathlib import Path

from ..models import Outcome, OutcomeKind
from .base import Processor

UPDATED = "Updated"
UP_TO_DATE = "Up to Date"
AUTH_REQUIRED = "Skipped - Auth Required"
ERROR = "Error"

# git exits 128 on fatal errors, which for `pull` is almost always auth/remote access
AUTH_EXIT_CODE = 128

AUTH_MARKERS = (
    "authentication failed",
    "could not read username",
    "could not read password",
    "terminal prompts disabled",
    "credentials",
    "access denied",
    "permission denied",
)

UP_TO_DATE_MARKERS = ("already up to date", "already up-to-date")


def git_available() -> bool:
    return shutil.which("git") is not None


def is_git_repo(path: Path) -> bool:
    """Directory holding a .git directory."""
    return path.is_dir() and (path / ".git").is_dir()


def _git_env() -> dict[str, str]:
    env = dict(os.environ)
    env["GIT_TERMINAL_PROMPT"] = "0"
    env["GIT_ASKPASS"] = "echo"
    env["GIT_SSH_COMMAND"] = "ssh -o BatchMode=yes -o StrictHostKeyChecking=accept-new"
    return env


def _first_line(text: str) -> str:
    for ln in text.splitlines():
        if ln.strip():
            return ln.strip()
    return ""


def pull_repo(repo: Path) -> Outcome:
    """Run `git pull` in repo and classify the result."""
    try:
        result = subprocess.run(
            ["git", "-C", str(repo), "pull"],
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            env=_git_env(),
        )
    except (OSError, ValueError) as e:
        return Outcome.failed(f"could not run git: {e}", label=ERROR)

    out = (result.stdout or "").lower()
    err = (result.stderr or "").lower()
    up_to_date = any(m in out or m in err for m in UP_TO_DATE_MARKERS)
    if result.returncode == 0:
        if up_to_date:
            return Outcome.success(label=UP_TO_DATE)
        return Outcome.success(label=UPDATED)

    if result.returncode == AUTH_EXIT_CODE or any(m in err for m in AUTH_MARKERS):
        return Outcome.skipped("authentication required", label=AUTH_REQUIRED)

    # git can exit non-zero after reporting there was nothing to pull
    if up_to_date:
        return Outcome.success(label=UP_TO_DATE)

    message = _first_line(result.stderr or "") or f"git pull exited with {result.returncode}"
    return Outcome.failed(message, label=ERROR)


def git_processor() -> Processor:
    return Processor(
        name="git-sync",
        title="Sync",
        noun="repositories",
        predicate=is_git_repo,
        classify=pull_repo,
        summary_labels={
            OutcomeKind.SUCCESS: "Synced repositories",
            OutcomeKind.FAILED: "Failed repositories",
            OutcomeKind.SKIPPED: "Skipped repositories (authentication required)",
        },
    )
