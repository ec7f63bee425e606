from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from typer.testing import CliRunner

from ccstatusline import __version__
from ccstatusline.cli.main import app
from ccstatusline.core.global_paths import GlobalPath
from ccstatusline.render import statusline
from ccstatusline.usage.block_cache import BlockCache


runner = CliRunner()


@pytest.fixture(autouse=True)
def no_terminal_probe(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(statusline, "detect_terminal_width", lambda: None)


def _write_settings(payload: dict) -> None:
    path = Path(GlobalPath.settings_file())
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload), encoding="utf-8")


def test_version() -> None:
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_renders_status_from_stdin() -> None:
    _write_settings({"lines": [[{"id": "1", "type": "model"}, {"id": "2", "type": "separator"},
                                {"id": "3", "type": "version"}]]})
    status = {"model": {"id": "claude-opus", "display_name": "Opus"}, "version": "1.0.80"}

    result = runner.invoke(app, [], input=json.dumps(status))

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert len(lines) == 1
    assert lines[0].startswith("\x1b[0m")
    assert "Opus" in lines[0]
    assert "v1.0.80" in lines[0]


def test_invalid_input_exits_zero() -> None:
    result = runner.invoke(app, [], input="not json")

    assert result.exit_code == 0
    assert result.output.startswith("ccstatusline:")


def test_empty_input_exits_zero() -> None:
    result = runner.invoke(app, [], input="")

    assert result.exit_code == 0
    assert "ccstatusline:" in result.output


def test_preview_command_shows_panel() -> None:
    result = runner.invoke(app, ["preview", "--width", "100"])

    assert result.exit_code == 0
    assert "Claude" in result.output
    assert "preview" in result.output


def test_config_path() -> None:
    result = runner.invoke(app, ["config", "--path"])

    assert result.exit_code == 0
    assert "settings.json" in result.output


def test_config_init_writes_defaults_once() -> None:
    first = runner.invoke(app, ["config", "--init"])
    second = runner.invoke(app, ["config", "--init"])

    assert first.exit_code == 0
    assert Path(GlobalPath.settings_file()).exists()
    assert "already exist" in second.output


def test_config_show_dumps_aliases() -> None:
    _write_settings({"flexMode": "full", "nerdFontIcons": True})

    result = runner.invoke(app, ["config", "--show"])

    assert result.exit_code == 0
    assert '"flexMode": "full"' in result.output
    assert '"nerdFontIcons": true' in result.output


def test_block_command_without_logs() -> None:
    result = runner.invoke(app, ["block"])

    assert result.exit_code == 0
    assert "No active block" in result.output


def test_block_command_from_cache_omits_last_activity() -> None:
    start = datetime.now(timezone.utc).replace(minute=0, second=0, microsecond=0) - timedelta(hours=1)
    BlockCache(GlobalPath.block_cache_file()).write(start)

    result = runner.invoke(app, ["block"])

    assert result.exit_code == 0
    assert "Block started" in result.output
    assert "Last activity" not in result.output
