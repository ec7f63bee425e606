"""ANSI escape helpers: measuring and truncating styled text."""

import re

ESC = "\x1b"
ELLIPSIS = "..."

_SGR_PATTERN = re.compile(r"\x1b\[[0-9;]*m")


def strip_ansi(text: str) -> str:
    """Remove SGR escape sequences."""
    return _SGR_PATTERN.sub("", text)


def visible_length(text: str) -> int:
    """Number of characters left once escape sequences are removed."""
    return len(strip_ansi(text))


def _take_visible(text: str, budget: int) -> str:
    """Copy ``text`` up to ``budget`` visible characters.

    Everything from ESC through the next ``m`` is copied whole and costs
    nothing against the budget. Escapes past the cut point are still
    copied so styles opened before it get closed.
    """
    out: list[str] = []
    escape: list[str] = []
    count = 0

    for char in text:
        if escape:
            escape.append(char)
            if char == "m":
                out.append("".join(escape))
                escape = []
            continue
        if char == ESC:
            escape.append(char)
            continue
        if count < budget:
            out.append(char)
            count += 1

    if escape:
        out.append("".join(escape))
    return "".join(out)


def truncate_ansi(text: str, width: int, ellipsis: str = ELLIPSIS) -> tuple[str, bool]:
    """Truncate to ``width`` visible columns, ending with ``ellipsis``.

    Returns the text and whether it was cut. Text that already fits is
    returned unchanged.
    """
    if width <= 0 or visible_length(text) <= width:
        return text, False
    budget = max(0, width - len(ellipsis))
    return _take_visible(text, budget) + ellipsis[: width], True


def clip_ansi(text: str, width: int) -> str:
    """Cut to ``width`` visible columns without an ellipsis."""
    if width <= 0 or visible_length(text) <= width:
        return text
    return _take_visible(text, width)
