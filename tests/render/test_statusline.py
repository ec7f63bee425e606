from __future__ import annotations

from pathlib import Path

import pytest

from ccstatusline.core.global_paths import GlobalPath
from ccstatusline.render import statusline
from ccstatusline.render.ansi import strip_ansi
from ccstatusline.render.statusline import (
    build_context,
    format_output_line,
    render_preview,
    render_statusline,
    separators_used,
)
from ccstatusline.usage.block_cache import BlockCache
from ccstatusline.usage.status import StatusJSON
from tests.helpers import item, settings, usage_entry, utc, write_jsonl


@pytest.fixture(autouse=True)
def no_terminal_probe(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(statusline, "detect_terminal_width", lambda: None)


def visible(line: str) -> str:
    return strip_ansi(line).replace("\u00a0", " ")


def test_output_lines_use_nbsp_and_reset() -> None:
    assert format_output_line("a b") == "\x1b[0ma\u00a0b"


def test_render_statusline_skips_empty_lines() -> None:
    config = settings(lines=[
        [item("model")],
        [item("custom-text", customText="")],
        [item("custom-text", customText="second")],
    ])

    lines = render_statusline(StatusJSON.model_validate({"model": "claude-opus"}), config)

    assert len(lines) == 2
    assert lines[0].startswith("\x1b[0m")
    assert "Model: claude-opus" in visible(lines[0])
    assert "second" in lines[1]


def test_tokens_come_from_transcript_without_context_window(tmp_path: Path) -> None:
    transcript = write_jsonl(tmp_path / "t.jsonl", [usage_entry(utc(2025, 1, 1, 10), input_tokens=2000)])
    data = StatusJSON.model_validate({"transcript_path": str(transcript)})
    config = settings(lines=[[item("tokens-input")]])

    context = build_context(data, config, terminal_width=80)

    assert context.token_metrics is not None
    assert context.token_metrics.input_tokens == 2000
    assert context.block_window is None
    assert context.terminal_width == 80


def test_session_clock_falls_back_to_cost_duration() -> None:
    data = StatusJSON.model_validate({"cost": {"total_duration_ms": 75 * 60_000}})
    config = settings(lines=[[item("session-clock")]])

    assert build_context(data, config).session_duration == "1hr 15m"


def test_block_timer_reads_host_logs(isolated_dirs: Path) -> None:
    now = utc(2025, 1, 26, 18, 10)
    write_jsonl(
        isolated_dirs / ".claude" / "projects" / "demo" / "s.jsonl",
        [usage_entry(utc(2025, 1, 26, 16, 57))],
    )
    config = settings(lines=[[item("block-timer")]])

    lines = render_statusline(StatusJSON(), config, terminal_width=200, now=now)

    assert "Block: 2hr 10m" in visible(lines[0])
    assert BlockCache(GlobalPath.block_cache_file()).read() == utc(2025, 1, 26, 16)


def test_separators_used_counts_non_merged_items() -> None:
    assert separators_used([item("model"), item("separator"), item("version")]) == 2
    assert separators_used([item("model", merge=True), item("version")]) == 0
    assert separators_used([item("model")]) == 0


def test_global_separator_index_accumulates(monkeypatch: pytest.MonkeyPatch) -> None:
    seen = []
    original = statusline.render_line

    def spy(items, config, context):  # type: ignore[no-untyped-def]
        seen.append(context.global_separator_index)
        return original(items, config, context)

    monkeypatch.setattr(statusline, "render_line", spy)
    config = settings(lines=[
        [item("custom-text", customText="a"), item("custom-text", id="b", customText="b")],
        [item("custom-text", customText="c")],
    ])

    render_preview(config, 120)

    assert seen == [0, 1]


def test_preview_is_stable() -> None:
    config = settings()

    first = render_preview(config, 100)

    assert first
    assert render_preview(config, 100) == first
