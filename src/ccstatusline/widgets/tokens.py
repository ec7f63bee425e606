"""Token count and context usage widgets."""

from __future__ import annotations

from abc import abstractmethod
from typing import Optional

from .base import Widget, format_tokens
from ..core.config_schema import Settings, WidgetItem, WidgetKind
from ..render.context import RenderContext
from ..render.style import Color
from ..usage.model_context import TokenMetrics, context_percentage, usable_context_percentage


class _TokenCountWidget(Widget):
    preview = ""

    @abstractmethod
    def value(self, metrics: TokenMetrics) -> int:
        raise NotImplementedError

    def render(self, item: WidgetItem, context: RenderContext, settings: Settings) -> Optional[str]:
        if context.is_preview:
            return self.labelled(self.preview, item, settings)
        if context.token_metrics is None:
            return None
        return self.labelled(format_tokens(self.value(context.token_metrics)), item, settings)


class TokensInputWidget(_TokenCountWidget):
    kind = WidgetKind.TOKENS_INPUT
    name = "Tokens Input"
    label = "In: "
    color = Color.BLUE
    preview = "15.2k"

    def value(self, metrics: TokenMetrics) -> int:
        return metrics.input_tokens


class TokensOutputWidget(_TokenCountWidget):
    kind = WidgetKind.TOKENS_OUTPUT
    name = "Tokens Output"
    label = "Out: "
    color = Color.WHITE
    preview = "3.4k"

    def value(self, metrics: TokenMetrics) -> int:
        return metrics.output_tokens


class TokensCachedWidget(_TokenCountWidget):
    kind = WidgetKind.TOKENS_CACHED
    name = "Tokens Cached"
    label = "Cached: "
    color = Color.CYAN
    preview = "12k"

    def value(self, metrics: TokenMetrics) -> int:
        return metrics.cached_tokens


class TokensTotalWidget(_TokenCountWidget):
    kind = WidgetKind.TOKENS_TOTAL
    name = "Tokens Total"
    label = "Total: "
    color = Color.CYAN
    preview = "30.6k"

    def value(self, metrics: TokenMetrics) -> int:
        return metrics.total_tokens


class ContextLengthWidget(_TokenCountWidget):
    kind = WidgetKind.CONTEXT_LENGTH
    name = "Context Length"
    label = "Ctx: "
    color = Color.GRAY
    preview = "18.6k"

    def value(self, metrics: TokenMetrics) -> int:
        return metrics.context_length


class ContextPercentageWidget(Widget):
    """Context window usage; metadata ``inverse=true`` shows what is left."""

    kind = WidgetKind.CONTEXT_PERCENTAGE
    name = "Context %"
    label = "Ctx: "
    color = Color.BLUE
    preview_used = 9.3

    def percentage(self, context: RenderContext) -> float:
        return context_percentage(context.token_metrics, context.model_id)

    def render(self, item: WidgetItem, context: RenderContext, settings: Settings) -> Optional[str]:
        inverse = item.metadata.get("inverse") == "true"
        if context.is_preview:
            used = self.preview_used
        elif context.token_metrics is None:
            return None
        else:
            used = self.percentage(context)
        shown = 100 - used if inverse else used
        return self.labelled(f"{shown:.1f}%", item, settings)


class ContextPercentageUsableWidget(ContextPercentageWidget):
    """Usage measured against the part of the window before auto-compaction."""

    kind = WidgetKind.CONTEXT_PERCENTAGE_USABLE
    name = "Context % (usable)"
    label = "Ctx(u): "
    color = Color.GREEN
    preview_used = 11.6

    def percentage(self, context: RenderContext) -> float:
        return usable_context_percentage(context.token_metrics, context.model_id)
