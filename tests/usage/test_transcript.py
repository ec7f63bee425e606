from __future__ import annotations

from pathlib import Path

import pytest

from ccstatusline.usage.transcript import (
    format_duration_ms,
    parse_timestamp,
    session_duration,
    token_metrics,
)
from tests.helpers import usage_entry, utc, write_jsonl


def test_token_metrics_sum_usage(tmp_path: Path) -> None:
    path = write_jsonl(
        tmp_path / "t.jsonl",
        [
            usage_entry(utc(2025, 1, 1, 10), input_tokens=100, output_tokens=20, cache_read_input_tokens=1000),
            usage_entry(utc(2025, 1, 1, 10, 5), input_tokens=50, output_tokens=10, cache_creation_input_tokens=500),
            usage_entry(utc(2025, 1, 1, 10, 6), sidechain=True, input_tokens=7, output_tokens=3),
            "garbage",
        ],
    )

    metrics = token_metrics(str(path))

    assert metrics.input_tokens == 157
    assert metrics.output_tokens == 33
    assert metrics.cached_tokens == 1500
    assert metrics.total_tokens == 157 + 33 + 1500
    # latest main-chain entry only
    assert metrics.context_length == 550


def test_token_metrics_for_missing_file(tmp_path: Path) -> None:
    metrics = token_metrics(str(tmp_path / "missing.jsonl"))

    assert metrics.total_tokens == 0
    assert metrics.context_length == 0


def test_session_duration(tmp_path: Path) -> None:
    path = write_jsonl(
        tmp_path / "t.jsonl",
        [usage_entry(utc(2025, 1, 1, 10)), {"type": "summary"}, usage_entry(utc(2025, 1, 1, 12, 15))],
    )

    assert session_duration(str(path)) == "2hr 15m"
    assert session_duration(str(tmp_path / "missing.jsonl")) is None


@pytest.mark.parametrize(
    ("ms", "expected"),
    [(0, "<1m"), (59_999, "<1m"), (45 * 60_000, "45m"), (120 * 60_000, "2hr"), (135 * 60_000, "2hr 15m")],
)
def test_format_duration(ms: int, expected: str) -> None:
    assert format_duration_ms(ms) == expected


def test_parse_timestamp_variants() -> None:
    assert parse_timestamp("2025-01-26T14:00:00Z") == utc(2025, 1, 26, 14)
    assert parse_timestamp("2025-01-26T15:00:00+01:00") == utc(2025, 1, 26, 14)
    assert parse_timestamp("2025-01-26T14:00:00") == utc(2025, 1, 26, 14)
    assert parse_timestamp("nope") is None
    assert parse_timestamp(None) is None
    assert parse_timestamp(1737900000) is None
