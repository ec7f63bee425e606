"""CLI entry point for ccstatusline.

The host runs ``ccstatusline`` with the session status JSON on stdin and
shows whatever it prints. Run from a terminal without input, it shows a
preview of the configured lines instead.
"""

import json
import sys
from typing import Optional

import typer
from rich.console import Console

from .. import __version__

app = typer.Typer(
    name="ccstatusline",
    help="ccstatusline - configurable status lines for Claude Code sessions",
    no_args_is_help=False,
    add_completion=False,
    invoke_without_command=True,
)

console = Console()


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        console.print(f"ccstatusline {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    print_logs: bool = typer.Option(
        False,
        "--print-logs",
        help="Print logs to stderr",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Log level: DEBUG, INFO, WARN or ERROR",
    ),
    width: Optional[int] = typer.Option(
        None,
        "--width",
        "-w",
        help="Terminal width to render for instead of detecting it",
    ),
):
    """Render the status line from the status JSON on stdin."""
    from ..core.config import apply_logging, load_settings

    settings = load_settings()
    apply_logging(settings.logging, console=True if print_logs else None, level=log_level)
    ctx.obj = settings

    if ctx.invoked_subcommand is not None:
        return

    if sys.stdin.isatty():
        from .cmd.statusline import preview_command

        preview_command(console, settings, width)
        return

    from .cmd.statusline import statusline_command

    statusline_command(sys.stdin.read(), settings, width)


@app.command()
def preview(
    ctx: typer.Context,
    width: Optional[int] = typer.Option(
        None,
        "--width",
        "-w",
        help="Width of the preview (defaults to the terminal width)",
    ),
):
    """Preview the configured lines with sample values."""
    from .cmd.statusline import preview_command

    preview_command(console, ctx.obj, width)


@app.command()
def block():
    """Show the active 5-hour usage block."""
    from .cmd.statusline import block_command

    block_command(console)


@app.command()
def config(
    ctx: typer.Context,
    show: bool = typer.Option(
        False,
        "--show",
        help="Show the effective settings",
    ),
    path: bool = typer.Option(
        False,
        "--path",
        help="Show settings file path",
    ),
    init: bool = typer.Option(
        False,
        "--init",
        help="Write the default settings file if none exists",
    ),
):
    """Manage settings."""
    from ..core.config import ConfigError, Settings, save_settings
    from ..core.global_paths import GlobalPath

    if path:
        console.print(GlobalPath.settings_file(), soft_wrap=True)
        return

    if init:
        from pathlib import Path

        target = GlobalPath.settings_file()
        if Path(target).exists():
            console.print(f"[yellow]Settings already exist:[/yellow] {target}")
            return
        try:
            written = save_settings(Settings())
        except ConfigError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1)
        console.print(f"Wrote default settings to {written}")
        return

    if show:
        settings = ctx.obj
        console.print_json(json.dumps(settings.model_dump(mode="json", by_alias=True, exclude_none=True), indent=2))
        return

    console.print("Use --show to display settings, --path to show the settings path or --init to create it")


if __name__ == "__main__":
    app()
