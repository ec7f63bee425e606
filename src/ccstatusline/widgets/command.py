"""User-defined text and shell command widgets."""

from __future__ import annotations

import subprocess
from typing import Optional

from .base import Widget
from ..core.config_schema import Settings, WidgetItem, WidgetKind
from ..render.ansi import clip_ansi, strip_ansi
from ..render.context import RenderContext
from ..util.log import Log

log = Log.create({"service": "widget.command"})

DEFAULT_COMMAND_TIMEOUT_MS = 1000
PREVIEW_COMMAND_CHARS = 20


class CustomTextWidget(Widget):
    kind = WidgetKind.CUSTOM_TEXT
    name = "Custom Text"

    def supports_raw_value(self) -> bool:
        return False

    def render(self, item: WidgetItem, context: RenderContext, settings: Settings) -> Optional[str]:
        return item.custom_text or ""


class CustomCommandWidget(Widget):
    """Runs a shell command with the status JSON on stdin and shows its output.

    The output is clipped to ``maxWidth`` visible columns. Escapes from the
    command are kept only with ``preserveColors``; otherwise they are stripped
    and the item's own colour applies.
    """

    kind = WidgetKind.CUSTOM_COMMAND
    name = "Custom Command"

    def supports_raw_value(self) -> bool:
        return False

    def supports_colors(self, item: WidgetItem) -> bool:
        return not item.preserve_colors

    def preview(self, item: WidgetItem) -> str:
        command = item.command_path
        if not command:
            return "[No command]"
        suffix = "..." if len(command) > PREVIEW_COMMAND_CHARS else ""
        return f"[cmd: {command[:PREVIEW_COMMAND_CHARS]}{suffix}]"

    def execute(self, command: str, payload: str, timeout_ms: int) -> Optional[str]:
        try:
            result = subprocess.run(
                command,
                shell=True,
                input=payload,
                capture_output=True,
                text=True,
                timeout=timeout_ms / 1000,
            )
        except subprocess.TimeoutExpired:
            log.debug("custom command timed out", {"command": command, "timeout_ms": timeout_ms})
            return None
        except OSError as e:
            log.debug("custom command failed to start", {"command": command, "error": str(e)})
            return None
        if result.returncode != 0:
            log.debug("custom command failed", {"command": command, "code": result.returncode})
            return None
        return result.stdout.strip()

    def render(self, item: WidgetItem, context: RenderContext, settings: Settings) -> Optional[str]:
        if context.is_preview:
            return self.preview(item)
        if not item.command_path or context.data is None:
            return None

        payload = context.data.model_dump_json(exclude_none=True)
        output = self.execute(item.command_path, payload, item.timeout or DEFAULT_COMMAND_TIMEOUT_MS)
        if not output:
            return None

        if item.max_width and item.max_width > 0:
            output = clip_ansi(output, item.max_width)
        if not item.preserve_colors:
            output = strip_ansi(output)
        return output
