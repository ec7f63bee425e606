from __future__ import annotations

import json
from pathlib import Path

from ccstatusline.util.log import Log, LogFormat, LogLevel


def _log_file(tmp_path: Path) -> Path:
    (path,) = (tmp_path / "log").glob("*.log")
    return path


def test_log_is_silent_by_default(capsys) -> None:  # type: ignore[no-untyped-def]
    log = Log.create({"service": "test.silent"})
    log.error("nobody hears this")

    captured = capsys.readouterr()
    assert captured.err == ""
    assert captured.out == ""


def test_log_writes_console_and_file(tmp_path: Path, capsys) -> None:  # type: ignore[no-untyped-def]
    Log.configure(level=LogLevel.INFO, format=LogFormat.KV, console=True, file=True)

    log = Log.create({"service": "test.log"})
    log.info("hello", {"value": 7})
    Log.close()

    stderr = capsys.readouterr().err
    text = _log_file(tmp_path).read_text(encoding="utf-8")

    assert "msg=hello" in stderr
    assert "service=test.log" in stderr
    assert "value=7" in text


def test_log_supports_json_format(tmp_path: Path) -> None:
    Log.configure(level=LogLevel.INFO, format=LogFormat.JSON, console=False, file=True)

    log = Log.create({"service": "test.json"})
    log.info("hello world", {"meta": {"k": "v"}})
    Log.close()

    line = _log_file(tmp_path).read_text(encoding="utf-8").strip()
    payload = json.loads(line)

    assert payload["level"] == "info"
    assert payload["msg"] == "hello world"
    assert payload["service"] == "test.json"
    assert payload["meta"] == {"k": "v"}


def test_log_level_filters_lower_levels(capsys) -> None:  # type: ignore[no-untyped-def]
    Log.configure(level=LogLevel.WARN, console=True)

    log = Log.create({"service": "test.level"})
    log.info("dropped")
    log.warn("kept")

    stderr = capsys.readouterr().err
    assert "dropped" not in stderr
    assert "msg=kept" in stderr


def test_log_time_reports_duration(capsys) -> None:  # type: ignore[no-untyped-def]
    Log.configure(level=LogLevel.DEBUG, console=True)

    log = Log.create({"service": "test.timer"})
    with log.time("scan", {"files": 2}):
        pass

    stderr = capsys.readouterr().err
    assert "status=started" in stderr
    assert "status=completed" in stderr
    assert "duration=" in stderr


def test_create_caches_by_service() -> None:
    assert Log.create({"service": "same"}) is Log.create({"service": "same"})


def test_level_and_format_parsing() -> None:
    assert LogLevel.parse("debug") == LogLevel.DEBUG
    assert LogLevel.parse("WARNING") == LogLevel.WARN
    assert LogFormat.parse("json") == LogFormat.JSON
