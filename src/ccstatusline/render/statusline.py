"""Status line pipeline.

Gathers everything the widgets need for one refresh (token metrics, session
duration, the active usage block, terminal width), renders each configured
line and formats the result for the host.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Sequence

from .ansi import strip_ansi
from .context import RenderContext
from .layout import render_line
from .terminal import detect_terminal_width
from ..core.config_schema import FlexMode, Settings, WidgetItem, WidgetKind
from ..core.global_paths import GlobalPath
from ..usage.block_cache import BlockCache
from ..usage.blocks import ActivityWindow, BlockDetector
from ..usage.model_context import TokenMetrics, metrics_from_context_window
from ..usage.status import StatusJSON
from ..usage.transcript import format_duration_ms, session_duration, token_metrics
from ..util.log import Log

log = Log.create({"service": "statusline"})

RESET = "\x1b[0m"
NBSP = "\u00a0"

TOKEN_KINDS = frozenset({
    WidgetKind.TOKENS_INPUT,
    WidgetKind.TOKENS_OUTPUT,
    WidgetKind.TOKENS_CACHED,
    WidgetKind.TOKENS_TOTAL,
    WidgetKind.CONTEXT_LENGTH,
    WidgetKind.CONTEXT_PERCENTAGE,
    WidgetKind.CONTEXT_PERCENTAGE_USABLE,
})


def _configured_kinds(settings: Settings) -> set:
    return {item.type for line in settings.lines for item in line}


def gather_token_metrics(data: StatusJSON) -> Optional[TokenMetrics]:
    """Prefer the host's own context numbers; fall back to the transcript."""
    metrics = metrics_from_context_window(data.context_window, data.model_id)
    if metrics is not None:
        return metrics
    if data.transcript_path:
        return token_metrics(data.transcript_path)
    return None


def gather_session_duration(data: StatusJSON) -> Optional[str]:
    if data.transcript_path:
        duration = session_duration(data.transcript_path)
        if duration:
            return duration
    if data.cost is not None and data.cost.total_duration_ms is not None:
        return format_duration_ms(data.cost.total_duration_ms)
    return None


def detect_block(transcript_path: Optional[str] = None, now: Optional[datetime] = None) -> Optional[ActivityWindow]:
    """Active usage block for the host config directory owning the transcript."""
    detector = BlockDetector(
        GlobalPath.host_config(transcript_path),
        BlockCache(GlobalPath.block_cache_file()),
    )
    return detector.current(now)


def build_context(
    data: StatusJSON,
    settings: Settings,
    terminal_width: Optional[int] = None,
    now: Optional[datetime] = None,
) -> RenderContext:
    """Collect only the data that the configured widgets use."""
    kinds = _configured_kinds(settings)
    needs_tokens = bool(kinds & TOKEN_KINDS) or settings.flex_mode == FlexMode.FULL_UNTIL_THRESHOLD

    return RenderContext(
        data=data,
        token_metrics=gather_token_metrics(data) if needs_tokens else None,
        block_window=detect_block(data.transcript_path, now) if WidgetKind.BLOCK_TIMER in kinds else None,
        session_duration=gather_session_duration(data) if WidgetKind.SESSION_CLOCK in kinds else None,
        terminal_width=terminal_width if terminal_width is not None else detect_terminal_width(),
        now=now,
    )


def separators_used(items: Sequence[WidgetItem]) -> int:
    """Separator slots a rendered line consumes; merged items share one."""
    last = len(items) - 1
    non_merged = [item for index, item in enumerate(items) if index == last or not item.merge]
    return max(0, len(non_merged) - 1)


def render_lines(settings: Settings, context: RenderContext) -> List[str]:
    """Render every configured line; lines with no visible text are left out."""
    rendered = []
    separator_index = 0
    for index, items in enumerate(settings.lines):
        if not items:
            continue
        result = render_line(items, settings, context.for_line(index, separator_index))
        if not strip_ansi(result.rendered_text).strip():
            continue
        separator_index += separators_used(items)
        rendered.append(result.rendered_text)
    return rendered


def format_output_line(line: str) -> str:
    """Make a line survive the host's display.

    Plain spaces would be trimmed, so they become non-breaking; the leading
    reset cancels the dim style the host applies to status lines.
    """
    return RESET + line.replace(" ", NBSP)


def render_statusline(
    data: StatusJSON,
    settings: Settings,
    terminal_width: Optional[int] = None,
    now: Optional[datetime] = None,
) -> List[str]:
    """Output lines for one refresh, ready to print."""
    context = build_context(data, settings, terminal_width, now)
    with log.time("render statusline", {"lines": len(settings.lines)}):
        lines = render_lines(settings, context)
    return [format_output_line(line) for line in lines]


def render_preview(settings: Settings, terminal_width: Optional[int] = None) -> List[str]:
    """Render every line with mock values; no subprocesses and no file reads."""
    context = RenderContext(terminal_width=terminal_width, is_preview=True)
    return render_lines(settings, context)
