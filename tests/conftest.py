from collections.abc import Iterator
from pathlib import Path

import pytest

from ccstatusline.core.global_paths import GlobalPath
from ccstatusline.util.log import Log


@pytest.fixture(autouse=True)
def isolated_dirs(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[Path]:
    """Point every user directory at a per-test temporary tree."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("CCSTATUSLINE_TEST_HOME", str(home))
    monkeypatch.delenv("CLAUDE_CONFIG_DIR", raising=False)
    monkeypatch.setattr(GlobalPath, "config", classmethod(lambda cls: str(tmp_path / "config")))
    monkeypatch.setattr(GlobalPath, "cache", classmethod(lambda cls: str(tmp_path / "cache")))
    monkeypatch.setattr(GlobalPath, "log", classmethod(lambda cls: str(tmp_path / "log")))
    yield home


@pytest.fixture(autouse=True)
def _log_teardown() -> Iterator[None]:
    yield
    Log.reset()
