"""Git branch and working tree change widgets."""

from __future__ import annotations

import re
import subprocess
from typing import List, Optional, Tuple

from .base import Widget
from ..core.config_schema import Settings, WidgetItem, WidgetKind
from ..render.context import RenderContext
from ..render.style import Color
from ..util.log import Log

log = Log.create({"service": "widget.git"})

GIT_TIMEOUT = 2.0

_INSERTIONS = re.compile(r"(\d+) insertion")
_DELETIONS = re.compile(r"(\d+) deletion")


def run_git(args: List[str], cwd: Optional[str] = None, timeout: float = GIT_TIMEOUT) -> Optional[str]:
    """Run a git command and return its stripped stdout, or None on any failure."""
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        log.debug("git timed out", {"args": " ".join(args)})
        return None
    except OSError as e:
        log.debug("git unavailable", {"error": str(e)})
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip()


def parse_shortstat(text: str) -> Tuple[int, int]:
    """Insertions and deletions from ``git diff --shortstat`` output."""
    insertions = _INSERTIONS.search(text)
    deletions = _DELETIONS.search(text)
    return (
        int(insertions.group(1)) if insertions else 0,
        int(deletions.group(1)) if deletions else 0,
    )


def _cwd(context: RenderContext) -> Optional[str]:
    if context.data is None:
        return None
    if context.data.workspace and context.data.workspace.current_dir:
        return context.data.workspace.current_dir
    return context.data.cwd


class GitBranchWidget(Widget):
    kind = WidgetKind.GIT_BRANCH
    name = "Git Branch"
    label = "⎇ "
    color = Color.MAGENTA

    def render(self, item: WidgetItem, context: RenderContext, settings: Settings) -> Optional[str]:
        if context.is_preview:
            return self.labelled("main", item, settings)
        branch = run_git(["branch", "--show-current"], cwd=_cwd(context))
        if branch:
            return self.labelled(branch, item, settings)
        return f"{self.label}no git"


class GitChangesWidget(Widget):
    """Insertions and deletions across staged and unstaged changes."""

    kind = WidgetKind.GIT_CHANGES
    name = "Git Changes"
    color = Color.YELLOW

    def supports_raw_value(self) -> bool:
        return False

    def changes(self, cwd: Optional[str]) -> Optional[Tuple[int, int]]:
        unstaged = run_git(["diff", "--shortstat"], cwd=cwd)
        staged = run_git(["diff", "--cached", "--shortstat"], cwd=cwd)
        if unstaged is None or staged is None:
            return None
        added, removed = parse_shortstat(unstaged)
        staged_added, staged_removed = parse_shortstat(staged)
        return added + staged_added, removed + staged_removed

    def render(self, item: WidgetItem, context: RenderContext, settings: Settings) -> Optional[str]:
        if context.is_preview:
            return self.labelled("(+42,-10)", item, settings)
        changes = self.changes(_cwd(context))
        if changes is None:
            return "(no git)"
        return self.labelled(f"(+{changes[0]},-{changes[1]})", item, settings)
