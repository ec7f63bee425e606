"""Shared test helpers."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Optional

from ccstatusline.core.config_schema import Settings, WidgetItem
from ccstatusline.render.context import RenderContext


def utc(year: int, month: int, day: int, hour: int = 0, minute: int = 0, second: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, second, tzinfo=timezone.utc)


def item(type_: str, **fields: Any) -> WidgetItem:
    """Build a widget item; ``id`` defaults to the type name."""
    data = {"id": fields.pop("id", type_), "type": type_}
    data.update(fields)
    return WidgetItem.model_validate(data)


def settings(**fields: Any) -> Settings:
    return Settings.model_validate(fields)


def preview_context(width: Optional[int] = None) -> RenderContext:
    return RenderContext(terminal_width=width, is_preview=True)


def usage_entry(timestamp: datetime, *, sidechain: bool = False, **usage: Any) -> dict[str, Any]:
    """A transcript line for one assistant request."""
    counts = {"input_tokens": 100, "output_tokens": 50}
    counts.update(usage)
    entry: dict[str, Any] = {
        "timestamp": timestamp.isoformat().replace("+00:00", "Z"),
        "message": {"usage": counts},
    }
    if sidechain:
        entry["isSidechain"] = True
    return entry


def write_jsonl(path: Path, entries: Iterable[Any]) -> Path:
    """Write entries one per line; strings are written verbatim."""
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = [entry if isinstance(entry, str) else json.dumps(entry) for entry in entries]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path
