"""Layout engine: turns one configured line into one styled string.

Each widget is rendered and styled, empty widgets are dropped together
with the separator attached to them, default separators and padding are
inserted, and flex separators share the columns left over on the line.
The visible width never exceeds the target width; lines that would are
cut with an ellipsis.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from .ansi import truncate_ansi, visible_length
from .context import RenderContext
from .style import Color, ResolvedStyle, StyleOverrides, apply_colors, resolve_style
from ..core.config_schema import FlexMode, MergeMode, Settings, WidgetItem, WidgetKind
from ..usage.model_context import context_percentage
from ..util.log import Log
from ..widgets import get_widget

log = Log.create({"service": "render.layout"})

DEFAULT_SEPARATOR_CHAR = "|"
SEPARATOR_COLOR = Color.GRAY
FLEX_FALLBACK = " | "

# Columns held back from the detected width. Live output leaves room for the
# host's own padding; the preview also loses the border of its panel. The
# reserve variants keep space for the auto-compact notice.
LIVE_PADDING = 4
LIVE_RESERVE = 41
LIVE_THRESHOLD_RESERVE = 40
PREVIEW_PADDING = 6
PREVIEW_RESERVE = 43


@dataclass(frozen=True)
class Fragment:
    """One rendered element of a line, already styled."""

    text: str
    kind: WidgetKind
    item: WidgetItem
    style: Optional[ResolvedStyle] = None

    @property
    def is_content(self) -> bool:
        return not self.kind.is_separator


@dataclass(frozen=True)
class LineResult:
    rendered_text: str
    was_truncated: bool = False


class _Flex:
    """Marks where a flex separator's spaces go."""


FLEX = _Flex()
Piece = Union[str, _Flex]


def effective_width(detected: Optional[int], settings: Settings, context: RenderContext) -> Optional[int]:
    """Target width for a line, or None when it cannot be known."""
    if not detected or detected <= 0:
        return None

    mode = settings.flex_mode
    if context.is_preview:
        if mode == FlexMode.FULL_MINUS_RESERVE:
            target = detected - PREVIEW_RESERVE
        else:
            target = detected - PREVIEW_PADDING
    elif mode == FlexMode.FULL:
        target = detected - LIVE_PADDING
    elif mode == FlexMode.FULL_MINUS_RESERVE:
        target = detected - LIVE_RESERVE
    else:
        used = context_percentage(context.token_metrics, context.model_id)
        if used >= settings.compact_threshold:
            target = detected - LIVE_THRESHOLD_RESERVE
        else:
            target = detected - LIVE_PADDING

    return target if target > 0 else None


def separator_text(character: Optional[str]) -> str:
    char = character or DEFAULT_SEPARATOR_CHAR
    if char == ",":
        return ", "
    if char == " ":
        return " "
    return f" {char} "


def render_fragment(
    item: WidgetItem,
    context: RenderContext,
    settings: Settings,
    overrides: StyleOverrides,
) -> Optional[Fragment]:
    """Render and style one configured item; None when it has nothing to show."""
    if item.type == WidgetKind.FLEX_SEPARATOR:
        return Fragment(text="", kind=item.type, item=item)

    if item.type == WidgetKind.SEPARATOR:
        style = resolve_style(item.color, item.background_color, item.bold, overrides, SEPARATOR_COLOR)
        text = apply_colors(separator_text(item.character), style.foreground, style.background, style.bold)
        return Fragment(text=text, kind=item.type, item=item, style=style)

    widget = get_widget(item.type)
    if widget is None:
        log.debug("no widget for item", {"type": item.type.value})
        return None

    text = widget.render(item, context, settings)
    if text is None:
        return None

    style = resolve_style(item.color, item.background_color, item.bold, overrides, widget.default_color())
    if widget.supports_colors(item):
        text = apply_colors(text, style.foreground, style.background, style.bold)
    return Fragment(text=text, kind=item.type, item=item, style=style)


def collect_fragments(
    items: Sequence[WidgetItem],
    context: RenderContext,
    settings: Settings,
    overrides: StyleOverrides,
) -> List[Fragment]:
    """Render items in order, dropping empty ones and the separators they own.

    An omitted widget takes the explicit separator right after it, or when
    there is none, the one right before it.
    """
    rendered: List[Optional[Fragment]] = [render_fragment(item, context, settings, overrides) for item in items]

    for index, item in enumerate(items):
        if item.type.is_separator or rendered[index] is not None:
            continue
        after, before = index + 1, index - 1
        if after < len(items) and items[after].type == WidgetKind.SEPARATOR and rendered[after] is not None:
            rendered[after] = None
        elif before >= 0 and items[before].type == WidgetKind.SEPARATOR and rendered[before] is not None:
            rendered[before] = None

    fragments = [fragment for fragment in rendered if fragment is not None]
    while fragments and fragments[-1].kind == WidgetKind.SEPARATOR:
        fragments.pop()
    return fragments


def _default_separator(previous: Fragment, settings: Settings, overrides: StyleOverrides) -> str:
    separator = settings.default_separator or ""
    if settings.inherit_separator_colors and previous.style is not None:
        style = previous.style
        return apply_colors(separator, style.foreground, style.background, style.bold)
    if overrides.has_color:
        return apply_colors(separator, overrides.foreground, overrides.background, overrides.bold)
    return separator


def _padding(fragment: Fragment, settings: Settings, overrides: StyleOverrides) -> str:
    padding = settings.default_padding or ""
    background = overrides.background or fragment.item.background_color
    if padding and (background is not None or overrides.has_color):
        return apply_colors(padding, overrides.foreground, background)
    return padding


def assemble(fragments: Sequence[Fragment], settings: Settings, overrides: StyleOverrides) -> List[Piece]:
    """Insert default separators and padding; flex separators become markers."""
    pieces: List[Piece] = []
    for index, fragment in enumerate(fragments):
        previous = fragments[index - 1] if index > 0 else None

        if (
            settings.default_separator
            and previous is not None
            and previous.is_content
            and fragment.is_content
            and previous.item.merge_mode == MergeMode.NONE
        ):
            pieces.append(_default_separator(previous, settings, overrides))

        if fragment.kind == WidgetKind.FLEX_SEPARATOR:
            pieces.append(FLEX)
            continue
        if fragment.kind == WidgetKind.SEPARATOR:
            pieces.append(fragment.text)
            continue

        padding = _padding(fragment, settings, overrides)
        glued_left = previous is not None and previous.is_content and previous.item.merge_mode == MergeMode.NO_PADDING
        glued_right = fragment.item.merge_mode == MergeMode.NO_PADDING and index + 1 < len(fragments)
        left = "" if glued_left else padding
        right = "" if glued_right else padding
        pieces.append(left + fragment.text + right)
    return pieces


def distribute(pieces: Sequence[Piece], target: int) -> str:
    """Join pieces, spreading the spare columns over the flex markers.

    The first ``spare % flex_count`` gaps get one extra space.
    """
    groups: List[List[str]] = [[]]
    for piece in pieces:
        if piece is FLEX:
            groups.append([])
        else:
            groups[-1].append(piece)

    flex_count = len(groups) - 1
    texts = ["".join(group) for group in groups]
    content = sum(visible_length(text) for text in texts)
    spare = max(0, target - content)
    per_flex, extra = divmod(spare, flex_count) if flex_count else (0, 0)

    out = []
    for index, text in enumerate(texts):
        out.append(text)
        if index < flex_count:
            out.append(" " * (per_flex + (1 if index < extra else 0)))
    return "".join(out)


def render_line(items: Sequence[WidgetItem], settings: Settings, context: RenderContext) -> LineResult:
    """Render one configured line to its final styled text."""
    overrides = StyleOverrides.from_settings(settings)
    fragments = collect_fragments(items, context, settings, overrides)
    if not fragments:
        return LineResult("")

    pieces = assemble(fragments, settings, overrides)
    detected = context.terminal_width
    target = effective_width(detected, settings, context)

    if any(piece is FLEX for piece in pieces) and target is not None:
        line = distribute(pieces, target)
    else:
        if settings.default_separator:
            fallback = settings.default_separator
        else:
            fallback = apply_colors(FLEX_FALLBACK, SEPARATOR_COLOR)
        line = "".join(fallback if piece is FLEX else piece for piece in pieces)

    max_width = target or detected
    if max_width and max_width > 0:
        line, truncated = truncate_ansi(line, max_width)
        if truncated:
            log.debug("line truncated", {"line": context.line_index, "width": max_width})
        return LineResult(line, truncated)
    return LineResult(line)
