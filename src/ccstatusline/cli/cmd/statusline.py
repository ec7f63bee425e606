"""Rendering commands: the live status line and the preview."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from ...core.config import Settings
from ...render.statusline import detect_block, render_preview, render_statusline
from ...usage.status import StatusJSON
from ...util.log import Log

log = Log.create({"service": "cli.statusline"})


def parse_status(text: str) -> Optional[StatusJSON]:
    """Parse the status JSON from stdin; None when it is empty or invalid."""
    if not text.strip():
        return None
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        log.debug("status input is not JSON", {"error": str(e)})
        return None
    if not isinstance(payload, dict):
        return None
    try:
        return StatusJSON.model_validate(payload)
    except ValidationError as e:
        log.debug("status input does not match schema", {"error": str(e)})
        return None


def statusline_command(text: str, settings: Settings, width: Optional[int] = None) -> None:
    """Print the rendered lines for one refresh.

    Bad input prints a one-line diagnostic; the exit status stays 0 so the
    host keeps its status area.
    """
    data = parse_status(text)
    if data is None:
        typer.echo("ccstatusline: no valid status JSON on stdin")
        return

    for line in render_statusline(data, settings, terminal_width=width):
        typer.echo(line, color=True)


def preview_command(console: Console, settings: Settings, width: Optional[int] = None) -> None:
    """Show every configured line with mock values inside a panel."""
    lines = render_preview(settings, terminal_width=width or console.width)
    body = Text.from_ansi("\n".join(lines)) if lines else Text("(empty status line)", style="dim")
    console.print(Panel(body, title="ccstatusline preview", border_style="dim"))


def block_command(console: Console, now: Optional[datetime] = None) -> None:
    """Print the active usage block, if any."""
    window = detect_block(now=now)
    if window is None:
        console.print("[yellow]No active block[/yellow]")
        return

    state = "[green]active[/green]" if window.is_active else "[dim]ended[/dim]"
    console.print(f"Block started [cyan]{window.start_time.isoformat()}[/cyan] {state}")
    # a cached window only knows its start
    if window.last_activity != window.start_time:
        console.print(f"  Last activity: {window.last_activity.isoformat()}")
