"""Post-action gate: one confirmation, then a follow-up action per flagged item."""

import logging
from pathlib import Path
from typing import Callable, Iterable

from .errors import PostActionError
from .models import ActionResult, WorkItem

logger = logging.getLogger(__name__)

Action = Callable[[Path], object]
PromptFn = Callable[[str], bool]


def delete_file(path: Path) -> bool:
    """Stock follow-up action: remove the file."""
    Path(path).unlink()
    return True


def _attempt(action: Action, item: WorkItem) -> ActionResult:
    try:
        ok = action(item.path)
        if ok is False:
            raise PostActionError(f"action reported failure for {item.path}")
    except PostActionError as e:
        return ActionResult(item=item, ok=False, error=str(e))
    except Exception as e:
        return ActionResult(item=item, ok=False, error=str(PostActionError(f"{item.path}: {e}")))
    return ActionResult(item=item, ok=True)


def confirm_and_act(
    flagged: Iterable[WorkItem],
    action: Action,
    prompt_fn: PromptFn,
    message: str = "Apply the follow-up action to all flagged items?",
    on_result: Callable[[ActionResult], None] | None = None,
) -> list[ActionResult]:
    """
    Ask once. On yes, run action on every flagged item in order.

    Nothing flagged means no prompt. A failure on one item is recorded and
    the rest are still attempted.
    """
    items = list(flagged)
    if not items:
        return []
    try:
        confirmed = prompt_fn(message) is True
    except (EOFError, KeyboardInterrupt):
        confirmed = False
    if not confirmed:
        logger.debug("follow-up action declined for %d items", len(items))
        return []
    results: list[ActionResult] = []
    for item in items:
        r = _attempt(action, item)
        if not r.ok:
            logger.debug("follow-up failed: %s", r.error)
        results.append(r)
        if on_result is not None:
            try:
                on_result(r)
            except Exception as e:
                logger.warning("result hook failed on %s: %s", item.path, e)
    return results
