"""Terminal width detection.

The status line command runs with its stdout piped to the host, so the
width of our own stdout says nothing. The host's controlling terminal is
found through the parent process and queried with ``stty``; ``tput`` and
``COLUMNS`` are the fallbacks.
"""

from __future__ import annotations

import os
import subprocess
from typing import Optional

from ..util.log import Log

log = Log.create({"service": "render.terminal"})

PROBE_TIMEOUT = 1.0


def _run(command: str, timeout: float = PROBE_TIMEOUT) -> Optional[str]:
    try:
        result = subprocess.run(
            command,
            shell=True,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except (subprocess.TimeoutExpired, OSError) as e:
        log.debug("terminal probe failed", {"command": command, "error": str(e)})
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip()


def _positive_int(text: Optional[str]) -> Optional[int]:
    if not text:
        return None
    try:
        value = int(text)
    except ValueError:
        return None
    return value if value > 0 else None


def parent_tty_width() -> Optional[int]:
    """Columns of the parent process's controlling terminal."""
    tty = _run(f"ps -o tty= -p {os.getppid()}")
    if not tty or tty in ("?", "??"):
        return None
    size = _run(f"stty size < /dev/{tty}")
    if not size:
        return None
    parts = size.split()
    if len(parts) != 2:
        return None
    return _positive_int(parts[1])


def detect_terminal_width() -> Optional[int]:
    """Best guess at the host terminal's width, or None when unknown."""
    if os.name == "nt":
        return _positive_int(os.environ.get("COLUMNS"))

    width = parent_tty_width()
    if width is None:
        width = _positive_int(_run("tput cols 2>/dev/null"))
    if width is None:
        width = _positive_int(os.environ.get("COLUMNS"))
    log.debug("terminal width", {"width": width})
    return width
