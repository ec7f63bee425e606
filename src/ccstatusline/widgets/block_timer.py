"""Elapsed time in the current 5-hour usage block."""

from __future__ import annotations

from typing import Optional

from .base import Widget, format_widget_label
from ..core.config_schema import Settings, WidgetItem, WidgetKind
from ..render.context import RenderContext
from ..render.style import Color
from ..usage.blocks import BLOCK_DURATION

PROGRESS_BAR_WIDTH = 32
SHORT_PROGRESS_BAR_WIDTH = 16
FILLED = "█"
EMPTY = "░"

PREVIEW_BARS = {
    "progress": FILLED * 22 + EMPTY * 8,
    "progress-short": FILLED * 7 + EMPTY * 8,
}
PREVIEW_PERCENT = "73.9"
PREVIEW_HOURS, PREVIEW_MINUTES = 3, 45


def format_block_time(hours: int, minutes: int, time_format: str = "full") -> str:
    if time_format == "compact":
        return f"{hours}h" if minutes == 0 else f"{hours}h{minutes}m"
    if time_format == "clock":
        return f"{hours}:{minutes:02d}"
    return f"{hours}hr" if minutes == 0 else f"{hours}hr {minutes}m"


def progress_bar(progress: float, width: int) -> str:
    filled = int(progress * width)
    return FILLED * filled + EMPTY * (width - filled)


class BlockTimerWidget(Widget):
    """Block progress as elapsed time or a bar.

    Metadata ``display`` picks ``time`` (default), ``progress`` or
    ``progress-short``; ``timeFormat`` picks ``full``, ``compact`` or
    ``clock`` for the time display.
    """

    kind = WidgetKind.BLOCK_TIMER
    name = "Block Timer"
    color = Color.YELLOW

    def _format(self, value: str, label: str, item: WidgetItem, settings: Settings) -> str:
        return format_widget_label(self.kind, value, label, item.raw_value, settings.nerd_font_icons)

    def _bar(self, bar: str, percent: str, item: WidgetItem, settings: Settings) -> str:
        return self._format(f"[{bar}] {percent}%", "Block ", item, settings)

    def render(self, item: WidgetItem, context: RenderContext, settings: Settings) -> Optional[str]:
        display = item.metadata.get("display", "time")
        time_format = item.metadata.get("timeFormat", "full")
        width = SHORT_PROGRESS_BAR_WIDTH if display == "progress-short" else PROGRESS_BAR_WIDTH
        show_bar = display in ("progress", "progress-short")

        if context.is_preview:
            if show_bar:
                return self._bar(PREVIEW_BARS[display], PREVIEW_PERCENT, item, settings)
            value = format_block_time(PREVIEW_HOURS, PREVIEW_MINUTES, time_format)
            return self._format(value, "Block: ", item, settings)

        window = context.block_window
        if window is None:
            if show_bar:
                return self._bar(EMPTY * width, "0", item, settings)
            return self._format(format_block_time(0, 0, time_format), "Block: ", item, settings)

        elapsed = max(0.0, (context.current_time() - window.start_time).total_seconds())
        if show_bar:
            progress = min(elapsed / BLOCK_DURATION.total_seconds(), 1.0)
            return self._bar(progress_bar(progress, width), f"{progress * 100:.1f}", item, settings)

        minutes_total = int(elapsed // 60)
        value = format_block_time(minutes_total // 60, minutes_total % 60, time_format)
        return self._format(value, "Block: ", item, settings)
