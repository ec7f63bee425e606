"""Terminal and working directory widgets."""

from __future__ import annotations

import re
from typing import Optional

from .base import Widget
from ..core.config_schema import Settings, WidgetItem, WidgetKind
from ..core.global_paths import GlobalPath
from ..render.context import RenderContext
from ..render.style import Color

PREVIEW_HOME = "/Users/example"
PREVIEW_CWD = PREVIEW_HOME + "/Documents/Projects/my-project"

_PATH_SEPARATORS = re.compile(r"[\\/]+")


class TerminalWidthWidget(Widget):
    kind = WidgetKind.TERMINAL_WIDTH
    name = "Terminal Width"
    label = "Term: "
    color = Color.GRAY

    def render(self, item: WidgetItem, context: RenderContext, settings: Settings) -> Optional[str]:
        width = context.terminal_width
        if context.is_preview:
            return self.labelled(str(width) if width else "??", item, settings)
        if not width:
            return None
        return self.labelled(str(width), item, settings)


def _separator(path: str) -> str:
    return "\\" if "\\" in path and "/" not in path else "/"


def abbreviate_home(path: str, home: str) -> str:
    if home and path.startswith(home):
        return "~" + path[len(home):]
    return path


def fish_style(path: str, home: str) -> str:
    """Shorten every directory except the first and last to one letter."""
    sep = _separator(path)
    path = abbreviate_home(path, home)
    parts = [part for part in _PATH_SEPARATORS.split(path) if part]
    short = []
    for index, part in enumerate(parts):
        if index in (0, len(parts) - 1):
            short.append(part)
        elif part.startswith(".") and len(part) > 1:
            short.append(part[:2])
        else:
            short.append(part[0])
    joined = sep.join(short)
    if path.startswith("/"):
        return sep + joined
    return joined


def last_segments(path: str, segments: int) -> str:
    """Keep only the last ``segments`` components behind ``...``."""
    sep = _separator(path)
    parts = [part for part in _PATH_SEPARATORS.split(path) if part]
    if segments <= 0 or len(parts) <= segments:
        return path
    prefix = "~/" if path.startswith("~") else ""
    return prefix + "..." + sep + sep.join(parts[-segments:])


def format_cwd(
    path: str,
    home: str,
    segments: Optional[int] = None,
    abbreviate: bool = False,
    fish: bool = False,
) -> str:
    if fish:
        return fish_style(path, home)
    if abbreviate:
        path = abbreviate_home(path, home)
    if segments:
        path = last_segments(path, segments)
    return path


class CurrentWorkingDirWidget(Widget):
    """Working directory of the session.

    Metadata: ``segments`` keeps the last N components, ``abbreviateHome``
    replaces the home directory with ``~`` and ``fishStyle`` shortens the
    middle components.
    """

    kind = WidgetKind.CURRENT_WORKING_DIR
    name = "Current Working Dir"
    label = "cwd: "
    color = Color.BLUE

    def render(self, item: WidgetItem, context: RenderContext, settings: Settings) -> Optional[str]:
        try:
            segments = int(item.metadata.get("segments", "0"))
        except ValueError:
            segments = 0
        abbreviate = item.metadata.get("abbreviateHome") == "true"
        fish = item.metadata.get("fishStyle") == "true"

        if context.is_preview:
            path, home = PREVIEW_CWD, PREVIEW_HOME
        else:
            data = context.data
            path = None
            if data is not None:
                path = data.cwd or (data.workspace.current_dir if data.workspace else None)
            if not path:
                return None
            home = GlobalPath.home()

        return self.labelled(format_cwd(path, home, segments, abbreviate, fish), item, settings)
