"""Session transcript parsing.

Transcripts are JSON-lines files: one independent JSON object per line.
Unreadable files and malformed lines count as missing data.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from .model_context import TokenMetrics
from ..util.log import Log

log = Log.create({"service": "usage.transcript"})


def iter_json_lines(path: str | Path) -> Iterator[Dict[str, Any]]:
    """Yield each JSON object in a JSON-lines file, skipping bad lines."""
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as handle:
            for line in handle:
                line = line.strip()
                if not line:
                    continue
                try:
                    data = json.loads(line)
                except ValueError:
                    continue
                if isinstance(data, dict):
                    yield data
    except OSError as e:
        log.debug("cannot read transcript", {"path": str(path), "error": str(e)})


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp into an aware UTC datetime."""
    if not isinstance(value, str) or not value:
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _usage(entry: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    message = entry.get("message")
    if not isinstance(message, dict):
        return None
    usage = message.get("usage")
    return usage if isinstance(usage, dict) else None


def _count(usage: Dict[str, Any], key: str) -> int:
    value = usage.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return int(value)


def token_metrics(transcript_path: str) -> TokenMetrics:
    """Sum token usage over a transcript.

    Context length comes from the most recent main-chain entry, since
    side-chain requests run with their own context.
    """
    input_tokens = output_tokens = cached_tokens = 0
    latest_time: Optional[datetime] = None
    latest_usage: Optional[Dict[str, Any]] = None

    for entry in iter_json_lines(transcript_path):
        usage = _usage(entry)
        if usage is None:
            continue
        input_tokens += _count(usage, "input_tokens")
        output_tokens += _count(usage, "output_tokens")
        cached_tokens += _count(usage, "cache_read_input_tokens")
        cached_tokens += _count(usage, "cache_creation_input_tokens")

        if entry.get("isSidechain") is True:
            continue
        stamp = parse_timestamp(entry.get("timestamp"))
        if stamp is not None and (latest_time is None or stamp > latest_time):
            latest_time = stamp
            latest_usage = usage

    context_length = 0
    if latest_usage is not None:
        context_length = (
            _count(latest_usage, "input_tokens")
            + _count(latest_usage, "cache_read_input_tokens")
            + _count(latest_usage, "cache_creation_input_tokens")
        )

    return TokenMetrics(
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        cached_tokens=cached_tokens,
        total_tokens=input_tokens + output_tokens + cached_tokens,
        context_length=context_length,
    )


def format_duration_ms(duration_ms: float) -> str:
    """Format a duration as ``<1m``, ``45m``, ``2hr`` or ``2hr 15m``."""
    total_minutes = int(duration_ms // 60_000)
    if total_minutes < 1:
        return "<1m"
    hours, minutes = divmod(total_minutes, 60)
    if hours == 0:
        return f"{minutes}m"
    if minutes == 0:
        return f"{hours}hr"
    return f"{hours}hr {minutes}m"


def session_duration(transcript_path: str) -> Optional[str]:
    """Time between the first and last timestamped entries of a transcript."""
    first: Optional[datetime] = None
    last: Optional[datetime] = None
    for entry in iter_json_lines(transcript_path):
        stamp = parse_timestamp(entry.get("timestamp"))
        if stamp is None:
            continue
        if first is None:
            first = stamp
        last = stamp

    if first is None or last is None:
        return None
    return format_duration_ms((last - first).total_seconds() * 1000)
