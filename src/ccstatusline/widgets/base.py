"""Widget framework.

A widget turns the render context into one text fragment, or None when
the data it needs is absent. Styling and layout are applied afterwards by
the renderer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Optional

from ..core.config_schema import Settings, WidgetItem, WidgetKind
from ..render.context import RenderContext
from ..render.style import Color

# Nerd Font v3 glyphs shown instead of text labels when nerdFontIcons is on.
NERD_FONT_ICONS: Dict[WidgetKind, str] = {
    WidgetKind.MODEL: "\U000F06A9",
    WidgetKind.GIT_BRANCH: "\uE725",
    WidgetKind.GIT_CHANGES: "\U000F02A2",
    WidgetKind.TOKENS_INPUT: "\uF019",
    WidgetKind.TOKENS_OUTPUT: "\uF093",
    WidgetKind.TOKENS_CACHED: "\U000F018F",
    WidgetKind.TOKENS_TOTAL: "\U000F0284",
    WidgetKind.CONTEXT_LENGTH: "\U000F09A8",
    WidgetKind.CONTEXT_PERCENTAGE: "\uF0E4",
    WidgetKind.CONTEXT_PERCENTAGE_USABLE: "\uF0E4",
    WidgetKind.SESSION_CLOCK: "\uF017",
    WidgetKind.SESSION_COST: "\uF155",
    WidgetKind.BLOCK_TIMER: "\U000F13AB",
    WidgetKind.TERMINAL_WIDTH: "\uF120",
    WidgetKind.VERSION: "\uF02B",
    WidgetKind.OUTPUT_STYLE: "\uF1FC",
    WidgetKind.CURRENT_WORKING_DIR: "\uF07B",
    WidgetKind.SESSION_ID: "\uF2C1",
}


def format_widget_label(
    kind: WidgetKind,
    value: str,
    label: str,
    raw_value: bool,
    nerd_font_icons: bool,
) -> str:
    """Combine a value with its label.

    Raw value mode shows the value alone; icon mode shows ``<icon> <value>``
    for kinds that have an icon; otherwise ``<label><value>``.
    """
    if raw_value:
        return value
    if nerd_font_icons:
        icon = NERD_FONT_ICONS.get(kind)
        if icon:
            return f"{icon} {value}"
    return f"{label}{value}"


def format_tokens(count: int) -> str:
    if count >= 1_000_000:
        return f"{count / 1_000_000:.1f}M"
    if count >= 1000:
        return f"{count / 1000:.1f}k"
    return str(count)


class Widget(ABC):
    """Base class for widget kinds."""

    kind: WidgetKind
    name: str = ""
    label: str = ""
    color: Color = Color.WHITE

    def default_color(self) -> Color:
        return self.color

    def display_name(self) -> str:
        return self.name

    def supports_raw_value(self) -> bool:
        return True

    def supports_colors(self, item: WidgetItem) -> bool:
        return True

    def labelled(self, value: str, item: WidgetItem, settings: Settings) -> str:
        raw = item.raw_value and self.supports_raw_value()
        return format_widget_label(self.kind, value, self.label, raw, settings.nerd_font_icons)

    @abstractmethod
    def render(self, item: WidgetItem, context: RenderContext, settings: Settings) -> Optional[str]:
        """Produce the unstyled fragment, or None to omit the widget."""
        raise NotImplementedError
