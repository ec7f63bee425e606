from __future__ import annotations

from pathlib import Path

import pytest

from ccstatusline.core.global_paths import GlobalPath


def test_block_cache_lives_in_cache_dir(tmp_path: Path) -> None:
    assert GlobalPath.block_cache_file() == str(tmp_path / "cache" / "block-cache.json")


def test_host_config_defaults_to_home_claude(isolated_dirs: Path) -> None:
    assert GlobalPath.host_config() == str(isolated_dirs / ".claude")


def test_host_config_honours_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    custom = tmp_path / "custom-claude"
    custom.mkdir()
    monkeypatch.setenv("CLAUDE_CONFIG_DIR", str(custom))

    assert GlobalPath.host_config() == str(custom.resolve())


def test_host_config_prefers_transcript_ancestor(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("CLAUDE_CONFIG_DIR", str(tmp_path / "elsewhere"))
    transcript = tmp_path / "work" / ".claude" / "projects" / "demo" / "session.jsonl"

    assert GlobalPath.host_config(str(transcript)) == str(tmp_path / "work" / ".claude")
