from __future__ import annotations

from ccstatusline.render.style import (
    Color,
    StyleOverrides,
    apply_colors,
    apply_style,
    resolve_style,
)


def test_color_parse_accepts_background_names() -> None:
    assert Color.parse("bgBlue") == Color.BLUE
    assert Color.parse("bgBrightRed") is None
    assert Color.parse("bgRedBright") == Color.RED_BRIGHT
    assert Color.parse("grey") == Color.GRAY
    assert Color.parse("none") is None
    assert Color.parse("") is None


def test_apply_colors_uses_open_and_close_codes() -> None:
    assert apply_colors("hi", Color.RED) == "\x1b[31mhi\x1b[39m"
    assert apply_colors("hi", background=Color.BLUE) == "\x1b[44mhi\x1b[49m"
    assert apply_colors("hi", bold=True) == "\x1b[1mhi\x1b[22m"


def test_empty_text_is_left_unstyled() -> None:
    assert apply_colors("", Color.RED, Color.BLUE, True) == ""


def test_inner_close_codes_are_reopened() -> None:
    inner = apply_colors("b", Color.GREEN)
    outer = apply_colors(f"a{inner}c", Color.RED)

    assert outer == "\x1b[31ma\x1b[32mb\x1b[39m\x1b[31mc\x1b[39m"


def test_dim_foreground_is_ignored() -> None:
    assert apply_colors("hi", Color.DIM) == "hi"


def test_overrides_beat_item_colors() -> None:
    overrides = StyleOverrides(foreground=Color.WHITE, background=Color.BLACK, bold=True)

    style = resolve_style(Color.RED, Color.BLUE, False, overrides, Color.CYAN)

    assert style.foreground == Color.WHITE
    assert style.background == Color.BLACK
    assert style.bold is True


def test_item_color_beats_widget_default() -> None:
    none = StyleOverrides()

    assert resolve_style(Color.RED, None, None, none, Color.CYAN).foreground == Color.RED
    assert resolve_style(None, None, None, none, Color.CYAN).foreground == Color.CYAN
    assert apply_style("x", None, None, True, none) == "\x1b[1mx\x1b[22m"
