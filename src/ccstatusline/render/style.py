"""Colour palette and style resolution for status line fragments.

Colours form a closed set mapped to SGR codes by fixed tables; names are
validated when settings load, so rendering never looks a colour up by an
arbitrary string.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Dict, Optional

if TYPE_CHECKING:
    from ..core.config_schema import Settings


class Color(str, Enum):
    """Named terminal colours (chalk-style names, as found in settings files)."""

    BLACK = "black"
    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"
    BLUE = "blue"
    MAGENTA = "magenta"
    CYAN = "cyan"
    WHITE = "white"
    GRAY = "gray"
    BLACK_BRIGHT = "blackBright"
    RED_BRIGHT = "redBright"
    GREEN_BRIGHT = "greenBright"
    YELLOW_BRIGHT = "yellowBright"
    BLUE_BRIGHT = "blueBright"
    MAGENTA_BRIGHT = "magentaBright"
    CYAN_BRIGHT = "cyanBright"
    WHITE_BRIGHT = "whiteBright"
    DIM = "dim"

    @classmethod
    def parse(cls, value: str | None) -> Optional["Color"]:
        """Parse a colour name; ``bg`` prefixes are accepted for backgrounds.

        Returns None for empty values, the ``"none"`` sentinel and unknown
        names.
        """
        if not value:
            return None
        name = value.strip()
        if name.startswith("bg") and len(name) > 2:
            name = name[2].lower() + name[3:]
        if name == "grey":
            name = "gray"
        if name == "none":
            return None
        try:
            return cls(name)
        except ValueError:
            return None


# Renders unreadably on common terminal themes, so it is never applied as
# a foreground even when configured.
IGNORED_FOREGROUND = frozenset({Color.DIM})

FOREGROUND_CODES: Dict[Color, int] = {
    Color.BLACK: 30,
    Color.RED: 31,
    Color.GREEN: 32,
    Color.YELLOW: 33,
    Color.BLUE: 34,
    Color.MAGENTA: 35,
    Color.CYAN: 36,
    Color.WHITE: 37,
    Color.GRAY: 90,
    Color.BLACK_BRIGHT: 90,
    Color.RED_BRIGHT: 91,
    Color.GREEN_BRIGHT: 92,
    Color.YELLOW_BRIGHT: 93,
    Color.BLUE_BRIGHT: 94,
    Color.MAGENTA_BRIGHT: 95,
    Color.CYAN_BRIGHT: 96,
    Color.WHITE_BRIGHT: 97,
}

BACKGROUND_CODES: Dict[Color, int] = {color: code + 10 for color, code in FOREGROUND_CODES.items()}

FOREGROUND_CLOSE = 39
BACKGROUND_CLOSE = 49
BOLD_OPEN = 1
BOLD_CLOSE = 22


def sgr(code: int) -> str:
    return f"\x1b[{code}m"


def _wrap(text: str, open_code: int, close_code: int) -> str:
    if not text:
        return text
    open_seq = sgr(open_code)
    close_seq = sgr(close_code)
    # Re-open after any inner close so nested styling keeps this one.
    if close_seq in text:
        text = text.replace(close_seq, close_seq + open_seq)
    return f"{open_seq}{text}{close_seq}"


def apply_colors(
    text: str,
    foreground: Optional[Color] = None,
    background: Optional[Color] = None,
    bold: bool = False,
) -> str:
    """Wrap text in SGR sequences for the given foreground, background and bold."""
    result = text
    if foreground is not None and foreground not in IGNORED_FOREGROUND:
        code = FOREGROUND_CODES.get(foreground)
        if code is not None:
            result = _wrap(result, code, FOREGROUND_CLOSE)
    if background is not None:
        code = BACKGROUND_CODES.get(background)
        if code is not None:
            result = _wrap(result, code, BACKGROUND_CLOSE)
    if bold:
        result = _wrap(result, BOLD_OPEN, BOLD_CLOSE)
    return result


@dataclass(frozen=True)
class StyleOverrides:
    """Settings-level styling that beats every per-item setting."""

    foreground: Optional[Color] = None
    background: Optional[Color] = None
    bold: bool = False

    @property
    def has_color(self) -> bool:
        return self.foreground is not None or self.background is not None

    @classmethod
    def from_settings(cls, settings: "Settings") -> "StyleOverrides":
        return cls(
            foreground=settings.override_foreground_color,
            background=settings.override_background_color,
            bold=settings.global_bold,
        )


@dataclass(frozen=True)
class ResolvedStyle:
    foreground: Optional[Color]
    background: Optional[Color]
    bold: bool


def resolve_style(
    color: Optional[Color],
    background: Optional[Color],
    bold: Optional[bool],
    overrides: StyleOverrides,
    default_color: Optional[Color] = None,
) -> ResolvedStyle:
    """Resolve final styling: global override > per-item setting > widget default."""
    foreground = overrides.foreground or color or default_color
    return ResolvedStyle(
        foreground=foreground,
        background=overrides.background or background,
        bold=bool(overrides.bold or bold),
    )


def apply_style(
    text: str,
    color: Optional[Color],
    background: Optional[Color],
    bold: Optional[bool],
    overrides: StyleOverrides,
    default_color: Optional[Color] = None,
) -> str:
    style = resolve_style(color, background, bold, overrides, default_color)
    return apply_colors(text, style.foreground, style.background, style.bold)
