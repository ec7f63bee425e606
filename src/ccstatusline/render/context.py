"""Read-only data shared by every widget during one render pass."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional

from ..usage.blocks import ActivityWindow
from ..usage.model_context import TokenMetrics
from ..usage.status import StatusJSON


@dataclass(frozen=True)
class RenderContext:
    data: Optional[StatusJSON] = None
    token_metrics: Optional[TokenMetrics] = None
    block_window: Optional[ActivityWindow] = None
    session_duration: Optional[str] = None
    terminal_width: Optional[int] = None
    is_preview: bool = False
    line_index: int = 0
    # separators printed on earlier lines; lets separator styling continue across lines
    global_separator_index: int = 0
    now: Optional[datetime] = None

    def for_line(self, line_index: int, global_separator_index: int) -> "RenderContext":
        return replace(self, line_index=line_index, global_separator_index=global_separator_index)

    def current_time(self) -> datetime:
        return self.now or datetime.now(timezone.utc)

    @property
    def model_id(self) -> Optional[str]:
        return self.data.model_id if self.data else None
