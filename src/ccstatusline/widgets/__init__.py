"""Widget registry.

Every content ``WidgetKind`` maps to exactly one widget instance. Separator
kinds have no widget; the layout engine renders them.
"""

from typing import Dict, Optional

from .base import Widget, format_tokens, format_widget_label
from .block_timer import BlockTimerWidget
from .command import CustomCommandWidget, CustomTextWidget
from .git import GitBranchWidget, GitChangesWidget
from .session import (
    ModelWidget,
    OutputStyleWidget,
    SessionClockWidget,
    SessionCostWidget,
    SessionIdWidget,
    VersionWidget,
)
from .tokens import (
    ContextLengthWidget,
    ContextPercentageUsableWidget,
    ContextPercentageWidget,
    TokensCachedWidget,
    TokensInputWidget,
    TokensOutputWidget,
    TokensTotalWidget,
)
from .workspace import CurrentWorkingDirWidget, TerminalWidthWidget
from ..core.config_schema import WidgetKind

WIDGETS: Dict[WidgetKind, Widget] = {
    widget.kind: widget
    for widget in (
        ModelWidget(),
        OutputStyleWidget(),
        VersionWidget(),
        GitBranchWidget(),
        GitChangesWidget(),
        TokensInputWidget(),
        TokensOutputWidget(),
        TokensCachedWidget(),
        TokensTotalWidget(),
        ContextLengthWidget(),
        ContextPercentageWidget(),
        ContextPercentageUsableWidget(),
        SessionClockWidget(),
        SessionCostWidget(),
        SessionIdWidget(),
        BlockTimerWidget(),
        TerminalWidthWidget(),
        CurrentWorkingDirWidget(),
        CustomTextWidget(),
        CustomCommandWidget(),
    )
}


def get_widget(kind: WidgetKind) -> Optional[Widget]:
    return WIDGETS.get(kind)


__all__ = [
    "WIDGETS",
    "Widget",
    "format_tokens",
    "format_widget_label",
    "get_widget",
]
