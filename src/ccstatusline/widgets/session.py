"""Widgets that show fields of the status JSON."""

from __future__ import annotations

from typing import Optional

from .base import Widget
from ..core.config_schema import Settings, WidgetItem, WidgetKind
from ..render.context import RenderContext
from ..render.style import Color


class ModelWidget(Widget):
    kind = WidgetKind.MODEL
    name = "Model"
    label = "Model: "
    color = Color.CYAN

    def render(self, item: WidgetItem, context: RenderContext, settings: Settings) -> Optional[str]:
        if context.is_preview:
            return self.labelled("Claude", item, settings)
        name = context.data.model_display_name if context.data else None
        if not name:
            return None
        return self.labelled(name, item, settings)


class OutputStyleWidget(Widget):
    kind = WidgetKind.OUTPUT_STYLE
    name = "Output Style"
    label = "Style: "
    color = Color.CYAN

    def render(self, item: WidgetItem, context: RenderContext, settings: Settings) -> Optional[str]:
        if context.is_preview:
            return self.labelled("default", item, settings)
        style = context.data.output_style if context.data else None
        if style is None or not style.name:
            return None
        return self.labelled(style.name, item, settings)


class VersionWidget(Widget):
    kind = WidgetKind.VERSION
    name = "Version"
    label = "v"
    color = Color.GRAY

    def render(self, item: WidgetItem, context: RenderContext, settings: Settings) -> Optional[str]:
        if context.is_preview:
            return self.labelled("1.0.0", item, settings)
        version = context.data.version if context.data else None
        if not version:
            return None
        return self.labelled(version, item, settings)


class SessionClockWidget(Widget):
    """Elapsed time since the session's first transcript entry."""

    kind = WidgetKind.SESSION_CLOCK
    name = "Session Clock"
    label = "Session: "
    color = Color.YELLOW

    def render(self, item: WidgetItem, context: RenderContext, settings: Settings) -> Optional[str]:
        if context.is_preview:
            return self.labelled("2hr 15m", item, settings)
        if not context.session_duration:
            return None
        return self.labelled(context.session_duration, item, settings)


class SessionCostWidget(Widget):
    kind = WidgetKind.SESSION_COST
    name = "Session Cost"
    label = "Cost: "
    color = Color.GREEN

    def render(self, item: WidgetItem, context: RenderContext, settings: Settings) -> Optional[str]:
        if context.is_preview:
            return self.labelled("$2.45", item, settings)
        cost = context.data.cost if context.data else None
        if cost is None or cost.total_cost_usd is None:
            return None
        return self.labelled(f"${cost.total_cost_usd:.2f}", item, settings)


class SessionIdWidget(Widget):
    kind = WidgetKind.SESSION_ID
    name = "Claude Session ID"
    label = "Session ID: "
    color = Color.CYAN

    def render(self, item: WidgetItem, context: RenderContext, settings: Settings) -> Optional[str]:
        if context.is_preview:
            return self.labelled("preview-session-id", item, settings)
        session_id = context.data.session_id if context.data else None
        if not session_id:
            return None
        return self.labelled(session_id, item, settings)
